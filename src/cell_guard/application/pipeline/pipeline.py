"""Application pipeline – Pipeline class."""
from __future__ import annotations

from typing import Any

from cell_guard.application.pipeline.middleware import Handler, Middleware
from cell_guard.application.pipeline.service import FnService


class Pipeline:
    """Builds and executes an ordered chain of middleware around a handler.

    The first middleware added is the outermost one.
    """

    def __init__(self) -> None:
        self._middlewares: list[Middleware] = []

    def add(self, middleware: Middleware) -> "Pipeline":
        """Append a middleware (fluent API)."""
        self._middlewares.append(middleware)
        return self

    def build(self, handler: Handler) -> Handler:
        """Compose the chain once and return it as a single handler."""
        chain = handler
        for mw in reversed(self._middlewares):
            _next = chain
            _mw = mw

            async def _wrap(req: Any, *, _n: Handler = _next, _m: Middleware = _mw) -> Any:
                return await _m(req, _n)

            chain = _wrap
        return chain

    def service(self, handler: Handler) -> FnService[Any, Any]:
        """Compose the chain and expose it as a :class:`Service`."""
        return FnService(self.build(handler))

    async def execute(self, request: Any, handler: Handler) -> Any:
        """Execute the full chain, ending with *handler*."""
        return await self.build(handler)(request)


__all__ = ["Pipeline"]
