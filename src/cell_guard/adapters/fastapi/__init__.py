"""FastAPI adapter – rate-limit middleware, rule providers and response handlers."""
from cell_guard.adapters.fastapi.handlers import default_error_handler, rate_limit_headers
from cell_guard.adapters.fastapi.middleware import FastAPIRateLimitMiddleware
from cell_guard.adapters.fastapi.providers import (
    ClientIPRuleProvider,
    HeaderRuleProvider,
    Route,
    RouteRuleProvider,
)

__all__ = [
    "ClientIPRuleProvider",
    "FastAPIRateLimitMiddleware",
    "HeaderRuleProvider",
    "Route",
    "RouteRuleProvider",
    "default_error_handler",
    "rate_limit_headers",
]
