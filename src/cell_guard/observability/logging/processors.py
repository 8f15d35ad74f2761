"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


class RuleContextProcessor:
    """structlog processor that flattens a ``rule`` entry into log fields.

    Pipeline code logs ``rule=<Rule>``; this renders it as ``key``,
    ``policy`` and ``resource`` so JSON output stays flat::

        structlog.configure(processors=[RuleContextProcessor(), ...])
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        rule = event_dict.pop("rule", None)
        if rule is not None:
            event_dict.setdefault("key", str(rule.key))
            event_dict.setdefault("policy", rule.policy.name or rule.policy.label)
            if rule.resource is not None:
                event_dict.setdefault("resource", rule.resource)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["RuleContextProcessor", "get_logger"]
