"""Application-layer errors – outcomes of the rate-limit decision."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cell_guard.kernel.errors.base import BaseError

if TYPE_CHECKING:
    from cell_guard.application.rate_limit.rule import RequestBlockedDetails
    from cell_guard.kernel.types.key import Key


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class RuleProvisionError(ApplicationError):
    """The rule provider could not classify the request.

    Raised from ``RuleProvider.provide``; carries an optional human-readable
    ``detail`` and the offending ``key`` when one was extracted.
    """

    default_code = "rule_provision_failed"

    def __init__(
        self,
        detail: str | None = None,
        *,
        key: "Key | str | int | None" = None,
        **kwargs: Any,
    ) -> None:
        message = "failed to provide rule"
        if detail:
            message = f"{message}: {detail}"
        if key is not None:
            from cell_guard.kernel.types.key import Key
            key = Key.of(key)
        super().__init__(
            message,
            detail={"key": str(key)} if key is not None else None,
            **kwargs,
        )
        self.rule_detail = detail
        self.key = key


class RateLimitError(ApplicationError):
    """The store returned a blocked verdict for the request's rule."""

    default_code = "rate_limit_exceeded"

    def __init__(self, blocked: "RequestBlockedDetails", **kwargs: Any) -> None:
        retry_after = blocked.retry_after_seconds
        super().__init__(
            f"request blocked for key {blocked.rule.key} and can be retried "
            f"after {retry_after} second(s)",
            detail={
                "key": str(blocked.rule.key),
                "policy": blocked.rule.policy.name,
                "resource": blocked.rule.resource,
                "retry_after": retry_after,
            },
            **kwargs,
        )
        self.blocked = blocked

    @property
    def retry_after_seconds(self) -> int:
        return self.blocked.retry_after_seconds


__all__ = ["ApplicationError", "RateLimitError", "RuleProvisionError"]
