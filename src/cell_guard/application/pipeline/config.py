"""Application pipeline – RateLimitConfig and handler signatures."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Generic, TypeVar

from cell_guard.application.rate_limit.rule import RequestAllowedDetails, Rule
from cell_guard.kernel.errors import BaseError

ReqT = TypeVar("ReqT")
RespT = TypeVar("RespT")

ErrorHandler = Callable[[BaseError, Any], Any]
"""``(error, request) -> response``; must not raise."""

SuccessHandler = Callable[[RequestAllowedDetails, Any], Any]
"""``(details, response) -> response | None``; mutate in place or return a replacement."""

UnruledHandler = Callable[[Any], Any]
"""``(response) -> response | None``; mutate in place or return a replacement."""


@dataclasses.dataclass(frozen=True)
class RateLimitConfig(Generic[ReqT, RespT]):
    """Everything a :class:`~cell_guard.application.pipeline.RateLimit` needs
    besides the inner service and the store.

    Built once at startup and shared by every pipeline instance.  The
    ``on_success`` / ``on_unruled`` calls return a new configuration::

        config = (
            RateLimitConfig(rule_provider, error_handler)
            .on_success(add_rate_limit_headers)
            .on_unruled(mark_unlimited)
        )

    *rule_provider* is either an object with a ``provide(request)`` method
    or a plain callable with the same signature.
    """

    rule_provider: Any
    error_handler: ErrorHandler
    success_handler: SuccessHandler | None = None
    unruled_handler: UnruledHandler | None = None

    def __post_init__(self) -> None:
        if not callable(getattr(self.rule_provider, "provide", None)) and not callable(
            self.rule_provider
        ):
            raise TypeError("rule_provider must define provide(request) or be callable")
        if not callable(self.error_handler):
            raise TypeError("error_handler must be callable")

    def on_success(self, handler: SuccessHandler) -> "RateLimitConfig[ReqT, RespT]":
        """Return a copy that runs *handler* on responses to allowed requests."""
        return dataclasses.replace(self, success_handler=handler)

    def on_unruled(self, handler: UnruledHandler) -> "RateLimitConfig[ReqT, RespT]":
        """Return a copy that runs *handler* on responses to unruled requests."""
        return dataclasses.replace(self, unruled_handler=handler)

    def provide(self, request: ReqT) -> Rule | None:
        provide = getattr(self.rule_provider, "provide", None)
        if callable(provide):
            return provide(request)
        return self.rule_provider(request)

    def handle_error(self, error: BaseError, request: ReqT) -> RespT:
        return self.error_handler(error, request)

    def handle_success(self, details: RequestAllowedDetails, response: RespT) -> RespT:
        if self.success_handler is None:
            return response
        replaced = self.success_handler(details, response)
        return response if replaced is None else replaced

    def handle_unruled(self, response: RespT) -> RespT:
        if self.unruled_handler is None:
            return response
        replaced = self.unruled_handler(response)
        return response if replaced is None else replaced


__all__ = ["ErrorHandler", "RateLimitConfig", "SuccessHandler", "UnruledHandler"]
