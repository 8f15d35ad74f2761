"""Application pipeline – RateLimit service and RateLimitLayer factory."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from cell_guard.application.pipeline.config import RateLimitConfig
from cell_guard.application.pipeline.connection import Connection, ConnectionPool
from cell_guard.application.pipeline.service import Service, service_fn
from cell_guard.application.rate_limit import codec
from cell_guard.application.rate_limit.rule import (
    RequestAllowedDetails,
    RequestBlockedDetails,
)
from cell_guard.application.rate_limit.verdict import Blocked
from cell_guard.kernel.errors import (
    ProtocolError,
    RateLimitError,
    RuleProvisionError,
    TransportError,
)
from cell_guard.observability.logging import get_logger

ReqT = TypeVar("ReqT")
RespT = TypeVar("RespT")

_log = get_logger(__name__)


def _as_service(inner: Any) -> Service[Any, Any]:
    if callable(getattr(inner, "poll_ready", None)) and callable(getattr(inner, "call", None)):
        return inner
    if callable(inner):
        return service_fn(inner)
    raise TypeError(f"{inner!r} is neither a Service nor a coroutine function")


class RateLimit(Generic[ReqT, RespT]):
    """Service that checks every request against the store before letting
    it reach *inner*.

    Per request::

        provide rule ──error──────────────────────────────▶ error handler
            │ None ──▶ inner.call ──▶ unruled handler
            ▼ rule
        CL.THROTTLE ──transport / protocol failure──────▶ error handler
            │ blocked ──────────────────────────────────▶ error handler
            ▼ allowed
        inner.call ──▶ success handler

    Exceptions raised by *inner* propagate unchanged.  Instances are cheap:
    the configuration and the connection are shared, never copied.
    """

    __slots__ = ("_config", "_connection", "_inner")

    def __init__(
        self,
        inner: Service[ReqT, RespT] | Any,
        config: RateLimitConfig[ReqT, RespT],
        connection: Connection | ConnectionPool,
    ) -> None:
        self._inner: Service[ReqT, RespT] = _as_service(inner)
        self._config = config
        self._connection = connection

    @property
    def inner(self) -> Service[ReqT, RespT]:
        return self._inner

    @property
    def config(self) -> RateLimitConfig[ReqT, RespT]:
        return self._config

    def clone(self) -> "RateLimit[ReqT, RespT]":
        return RateLimit(self._inner, self._config, self._connection)

    def poll_ready(self) -> bool:
        return self._inner.poll_ready()

    async def __call__(self, request: ReqT) -> RespT:
        return await self.call(request)

    async def call(self, request: ReqT) -> RespT:
        config = self._config

        try:
            rule = config.provide(request)
        except RuleProvisionError as exc:
            _log.warning(
                "rate_limit.rule_provision_failed",
                detail=exc.rule_detail,
                key=None if exc.key is None else str(exc.key),
            )
            return config.handle_error(exc, request)

        if rule is None:
            _log.debug("rate_limit.unruled")
            response = await self._inner.call(request)
            return config.handle_unruled(response)

        command = codec.encode(rule.key, rule.policy)
        try:
            reply = await self._round_trip(command)
        except TransportError as exc:
            _log.error("rate_limit.transport_failed", rule=rule, error=exc.message)
            return config.handle_error(exc, request)

        try:
            verdict = codec.decode(reply)
        except ProtocolError as exc:
            _log.error("rate_limit.protocol_violation", rule=rule, error=exc.message, reply=repr(reply))
            return config.handle_error(exc, request)

        if isinstance(verdict, Blocked):
            blocked = RequestBlockedDetails(details=verdict.details, rule=rule)
            _log.info("rate_limit.blocked", rule=rule, retry_after=blocked.retry_after_seconds)
            return config.handle_error(RateLimitError(blocked), request)

        _log.debug("rate_limit.allowed", rule=rule, remaining=verdict.details.remaining)
        response = await self._inner.call(request)
        return config.handle_success(RequestAllowedDetails(details=verdict.details, rule=rule), response)

    async def _round_trip(self, command: Sequence[Any]) -> Any:
        connection = self._connection
        if isinstance(connection, ConnectionPool):
            async with connection.acquire() as conn:
                return await conn.send(command)
        return await connection.send(command)

    def __repr__(self) -> str:
        return f"RateLimit(inner={self._inner!r})"


class RateLimitLayer(Generic[ReqT, RespT]):
    """Factory binding one configuration and one store handle.

    ``layer(inner)`` produces a :class:`RateLimit` around *inner* without
    copying the configuration or opening connections::

        layer = RateLimitLayer(config, RedisConnection.from_url("redis://localhost"))
        service = layer.layer(service_fn(handler))
    """

    __slots__ = ("_config", "_connection")

    def __init__(
        self,
        config: RateLimitConfig[ReqT, RespT],
        connection: Connection | ConnectionPool,
    ) -> None:
        if not isinstance(connection, (Connection, ConnectionPool)):
            raise TypeError("connection must provide send(command) or acquire()")
        self._config = config
        self._connection = connection

    @property
    def config(self) -> RateLimitConfig[ReqT, RespT]:
        return self._config

    @property
    def connection(self) -> Connection | ConnectionPool:
        return self._connection

    def clone(self) -> "RateLimitLayer[ReqT, RespT]":
        return RateLimitLayer(self._config, self._connection)

    def layer(self, inner: Service[ReqT, RespT] | Any) -> RateLimit[ReqT, RespT]:
        return RateLimit(inner, self._config, self._connection)


__all__ = ["RateLimit", "RateLimitLayer"]
