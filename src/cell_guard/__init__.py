"""
cell_guard – rate limiting middleware backed by Redis Cell (``CL.THROTTLE``).

Import path convention::

    from cell_guard.application.rate_limit import Policy, Rule
    from cell_guard.application.pipeline import RateLimitConfig, RateLimitLayer
    from cell_guard.adapters.redis import RedisConnection
    from cell_guard.adapters.fastapi import FastAPIRateLimitMiddleware
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
