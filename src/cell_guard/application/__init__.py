"""Application – rate-limit decision pipeline (framework-agnostic)."""

from cell_guard.application.pipeline import (
    Pipeline,
    RateLimit,
    RateLimitConfig,
    RateLimitLayer,
    RateLimitMiddleware,
    service_fn,
)
from cell_guard.application.rate_limit import (
    Policy,
    RequestAllowedDetails,
    RequestBlockedDetails,
    Rule,
    RuleProvider,
    Verdict,
)

__all__ = [
    "Pipeline",
    "Policy",
    "RateLimit",
    "RateLimitConfig",
    "RateLimitLayer",
    "RateLimitMiddleware",
    "RequestAllowedDetails",
    "RequestBlockedDetails",
    "Rule",
    "RuleProvider",
    "Verdict",
    "service_fn",
]
