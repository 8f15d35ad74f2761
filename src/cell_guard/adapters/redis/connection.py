"""Redis adapter – RedisConnection."""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from cell_guard.kernel.errors import TransportError

if TYPE_CHECKING:
    from cell_guard.config.settings import RedisSettings


def _require_redis() -> Any:
    try:
        import redis.asyncio as aioredis
        return aioredis
    except ImportError as exc:
        raise ImportError("Install 'cell-guard[redis]' to use the Redis adapter") from exc


def _redis_error() -> type[Exception]:
    from redis.exceptions import RedisError
    return RedisError


def _settings_kwargs(settings: "RedisSettings") -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if settings.max_connections is not None:
        kwargs["max_connections"] = settings.max_connections
    if settings.socket_timeout is not None:
        kwargs["socket_timeout"] = settings.socket_timeout
    return kwargs


class RedisConnection:
    """Shared ``redis.asyncio`` client exposed as a store connection.

    The client multiplexes concurrent commands over its own connection pool,
    so a single instance is shared by every pipeline.  Redis errors,
    including error replies such as ``unknown command 'CL.THROTTLE'`` when
    the module is not loaded, surface as :class:`TransportError`.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisConnection":
        aioredis = _require_redis()
        return cls(aioredis.from_url(url, **kwargs))

    @classmethod
    def from_settings(cls, settings: "RedisSettings") -> "RedisConnection":
        return cls.from_url(settings.url, **_settings_kwargs(settings))

    @property
    def client(self) -> Any:
        return self._client

    async def send(self, command: Sequence[Any]) -> Any:
        try:
            return await self._client.execute_command(*command)
        except _redis_error() as exc:
            raise TransportError(resource="redis", cause=exc) from exc

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisConnection"]
