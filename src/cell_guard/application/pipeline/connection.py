"""Application pipeline – store connection ports."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, AsyncContextManager, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """Port: send one encoded command to the store and await its reply.

    Implementations raise :class:`~cell_guard.kernel.errors.TransportError`
    when the store cannot be reached or rejects the command.  A shared
    connection must be safe for concurrent use.
    """

    async def send(self, command: Sequence[Any]) -> Any: ...


@runtime_checkable
class ConnectionPool(Protocol):
    """Port: hand out a :class:`Connection` for the duration of one request.

    ``acquire()`` returns an async context manager; the connection goes back
    to the pool when the block exits, whatever the outcome.  Acquisition
    failures raise :class:`~cell_guard.kernel.errors.TransportError`.
    """

    def acquire(self) -> AsyncContextManager[Connection]: ...


__all__ = ["Connection", "ConnectionPool"]
