"""Application pipeline – rate-limit service, layer and middleware chain."""
from cell_guard.application.pipeline.config import (
    ErrorHandler,
    RateLimitConfig,
    SuccessHandler,
    UnruledHandler,
)
from cell_guard.application.pipeline.connection import Connection, ConnectionPool
from cell_guard.application.pipeline.middleware import Handler, Middleware, Next, RateLimitMiddleware
from cell_guard.application.pipeline.pipeline import Pipeline
from cell_guard.application.pipeline.rate_limit import RateLimit, RateLimitLayer
from cell_guard.application.pipeline.service import FnService, Layer, Service, service_fn

__all__ = [
    "Connection",
    "ConnectionPool",
    "ErrorHandler",
    "FnService",
    "Handler",
    "Layer",
    "Middleware",
    "Next",
    "Pipeline",
    "RateLimit",
    "RateLimitConfig",
    "RateLimitLayer",
    "RateLimitMiddleware",
    "Service",
    "SuccessHandler",
    "UnruledHandler",
    "service_fn",
]
