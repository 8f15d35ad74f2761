"""Application pipeline – Middleware base and the rate-limit middleware."""
from __future__ import annotations

import abc
from typing import Any, Awaitable, Callable

from cell_guard.application.pipeline.service import service_fn

Handler = Callable[[Any], Awaitable[Any]]
Next = Callable[[Any], Awaitable[Any]]


class Middleware(abc.ABC):
    """Single node in the middleware chain."""

    @abc.abstractmethod
    async def __call__(self, request: Any, next_: Next) -> Any: ...


class RateLimitMiddleware(Middleware):
    """Run a :class:`~cell_guard.application.pipeline.RateLimitLayer` as a
    chain node: ``next_`` becomes the inner service of a fresh
    :class:`~cell_guard.application.pipeline.RateLimit` for each request.

    Usage::

        pipeline = Pipeline().add(RateLimitMiddleware(layer))
        response = await pipeline.execute(request, handler)
    """

    def __init__(self, layer: Any) -> None:
        self._layer = layer

    async def __call__(self, request: Any, next_: Next) -> Any:
        return await self._layer.layer(service_fn(next_)).call(request)


__all__ = ["Handler", "Middleware", "Next", "RateLimitMiddleware"]
