"""FastAPI adapter – FastAPIRateLimitMiddleware."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from cell_guard.application.pipeline import RateLimitLayer, service_fn

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp


class FastAPIRateLimitMiddleware(BaseHTTPMiddleware):
    """Run every HTTP request through a :class:`RateLimitLayer`.

    The downstream app (``call_next``) is the inner service, so handlers see
    Starlette ``Request`` / ``Response`` objects.  Non-HTTP scopes pass
    straight through.

    Usage::

        config = RateLimitConfig(
            HeaderRuleProvider("x-api-key", Policy.per_second(1)),
            default_error_handler,
        ).on_success(rate_limit_headers)

        app.add_middleware(
            FastAPIRateLimitMiddleware,
            layer=RateLimitLayer(config, RedisConnection.from_url(url)),
        )
    """

    def __init__(self, app: "ASGIApp", layer: RateLimitLayer[Any, Any]) -> None:
        super().__init__(app)
        self._layer = layer

    async def dispatch(self, request: "Request", call_next: RequestResponseEndpoint) -> "Response":
        return await self._layer.layer(service_fn(call_next)).call(request)


__all__ = ["FastAPIRateLimitMiddleware"]
