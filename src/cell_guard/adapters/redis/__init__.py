"""Redis adapter – shared connection and pooled connections for CL.THROTTLE."""
from cell_guard.adapters.redis.connection import RedisConnection
from cell_guard.adapters.redis.pool import PooledConnection, RedisConnectionPool

__all__ = ["PooledConnection", "RedisConnection", "RedisConnectionPool"]
