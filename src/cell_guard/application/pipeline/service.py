"""Application pipeline – Service and Layer capabilities."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Generic, Protocol, TypeVar, runtime_checkable

ReqT = TypeVar("ReqT")
RespT = TypeVar("RespT")
ReqT_contra = TypeVar("ReqT_contra", contravariant=True)
RespT_co = TypeVar("RespT_co", covariant=True)


@runtime_checkable
class Service(Protocol[ReqT_contra, RespT_co]):
    """Port: an asynchronous request handler.

    ``poll_ready`` reports whether the service can accept another call
    right now; ``call`` processes one request.  Implementations must be
    safe to call from many concurrent tasks.
    """

    def poll_ready(self) -> bool: ...

    async def call(self, request: ReqT_contra) -> RespT_co: ...


class Layer(Protocol):
    """Port: wrap an inner service into a new one."""

    def layer(self, inner: Any) -> Any: ...


class FnService(Generic[ReqT, RespT]):
    """Adapt a coroutine function into a :class:`Service` that is always ready."""

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[ReqT], Awaitable[RespT]]) -> None:
        self._fn = fn

    def poll_ready(self) -> bool:
        return True

    async def call(self, request: ReqT) -> RespT:
        return await self._fn(request)

    def __repr__(self) -> str:
        return f"FnService({getattr(self._fn, '__qualname__', self._fn)!r})"


def service_fn(fn: Callable[[ReqT], Awaitable[RespT]]) -> FnService[ReqT, RespT]:
    """Wrap *fn* as a service::

        async def hello(request):
            return "Hello, World!"

        svc = service_fn(hello)
    """
    return FnService(fn)


__all__ = ["FnService", "Layer", "Service", "service_fn"]
