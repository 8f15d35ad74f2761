"""Redis adapter – RedisConnectionPool."""
from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any

from cell_guard.adapters.redis.connection import _redis_error, _require_redis, _settings_kwargs
from cell_guard.kernel.errors import TransportError

if TYPE_CHECKING:
    from cell_guard.config.settings import RedisSettings


class PooledConnection:
    """One raw connection checked out of the pool for a single request."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection
        self.broken = False

    async def send(self, command: Sequence[Any]) -> Any:
        from redis.exceptions import ResponseError

        try:
            await self._connection.send_command(*command)
            return await self._connection.read_response()
        except ResponseError as exc:
            # error reply; the connection itself is still usable
            raise TransportError(resource="redis", cause=exc) from exc
        except _redis_error() as exc:
            self.broken = True
            raise TransportError(resource="redis", cause=exc) from exc
        except BaseException:
            # cancelled mid-command: an unread reply may be left on the socket
            self.broken = True
            raise


class RedisConnectionPool:
    """``redis.asyncio.ConnectionPool`` exposed as a store connection pool.

    Each ``acquire()`` checks one connection out and returns it when the
    block exits, including on errors and cancellation.  Connections that
    failed mid-command are disconnected before they go back.
    """

    def __init__(self, pool: Any) -> None:
        self._pool = pool

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisConnectionPool":
        aioredis = _require_redis()
        return cls(aioredis.ConnectionPool.from_url(url, **kwargs))

    @classmethod
    def from_settings(cls, settings: "RedisSettings") -> "RedisConnectionPool":
        return cls.from_url(settings.url, **_settings_kwargs(settings))

    @property
    def pool(self) -> Any:
        return self._pool

    @contextlib.asynccontextmanager
    async def acquire(self) -> AsyncIterator[PooledConnection]:
        try:
            connection = await self._pool.get_connection()
        except _redis_error() as exc:
            raise TransportError(resource="redis pool", cause=exc) from exc

        pooled = PooledConnection(connection)
        try:
            yield pooled
        finally:
            if pooled.broken:
                await connection.disconnect()
            await self._pool.release(connection)

    async def close(self) -> None:
        await self._pool.disconnect()


__all__ = ["PooledConnection", "RedisConnectionPool"]
