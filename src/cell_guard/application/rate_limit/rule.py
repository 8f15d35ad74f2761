"""Application rate limiting – Rule, RuleProvider, request-scoped details."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Protocol, TypeVar, Union

from cell_guard.application.rate_limit.policy import Policy
from cell_guard.application.rate_limit.verdict import AllowedDetails, BlockedDetails
from cell_guard.kernel.types import Key, KeyValue

ReqT = TypeVar("ReqT", contravariant=True)


@dataclasses.dataclass(frozen=True)
class Rule:
    """What to charge for one request: a key, a policy and an optional
    resource label (useful for logs and audit)."""

    key: Key
    policy: Policy
    resource: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.key, Key):
            object.__setattr__(self, "key", Key.of(self.key))

    @classmethod
    def new(cls, key: Key | KeyValue, policy: Policy) -> "Rule":
        return cls(key=Key.of(key), policy=policy)

    def with_resource(self, resource: str) -> "Rule":
        return dataclasses.replace(self, resource=resource)


class RuleProvider(Protocol[ReqT]):
    """Port: decide which rule, if any, applies to a request.

    Return ``None`` to let the request through without contacting the
    store.  Raise :class:`~cell_guard.kernel.errors.RuleProvisionError`
    when the request cannot be classified.  Must not block or perform I/O.
    """

    def provide(self, request: ReqT) -> Rule | None: ...


ProvideRuleFn = Callable[[Any], Union[Rule, None]]


@dataclasses.dataclass(frozen=True)
class RequestAllowedDetails:
    """Allowed verdict figures bundled with the rule that produced them."""
    details: AllowedDetails
    rule: Rule

    @property
    def key(self) -> Key:
        return self.rule.key

    @property
    def policy(self) -> Policy:
        return self.rule.policy

    @property
    def resource(self) -> str | None:
        return self.rule.resource


@dataclasses.dataclass(frozen=True)
class RequestBlockedDetails:
    """Blocked verdict figures bundled with the rule that produced them."""
    details: BlockedDetails
    rule: Rule

    @property
    def key(self) -> Key:
        return self.rule.key

    @property
    def policy(self) -> Policy:
        return self.rule.policy

    @property
    def resource(self) -> str | None:
        return self.rule.resource

    @property
    def retry_after_seconds(self) -> int:
        return self.details.retry_after_seconds


__all__ = [
    "ProvideRuleFn",
    "RequestAllowedDetails",
    "RequestBlockedDetails",
    "Rule",
    "RuleProvider",
]
