"""FastAPI adapter – ready-made error and success handlers.

Error mapping
-------------
``RuleProvisionError``  → 401
``RateLimitError``      → 429 + ``Retry-After``
anything else           → 500

Error body schema::

    {"code": "rate_limit_exceeded", "message": "..."}
"""
from __future__ import annotations

from typing import Any

from starlette.responses import JSONResponse, Response

from cell_guard.application.rate_limit import RequestAllowedDetails
from cell_guard.kernel.errors import (
    BaseError,
    ProtocolError,
    RateLimitError,
    RuleProvisionError,
    TransportError,
)
from cell_guard.observability.logging import get_logger

_log = get_logger(__name__)

RETRY_AFTER = "retry-after"
RATE_LIMIT_LIMIT = "x-ratelimit-limit"
RATE_LIMIT_REMAINING = "x-ratelimit-remaining"
RATE_LIMIT_RESET = "x-ratelimit-reset"


def default_error_handler(error: BaseError, request: Any) -> Response:  # noqa: ARG001
    """Turn any rate-limit pipeline error into a JSON response."""
    match error:
        case RuleProvisionError():
            _log.warning("rate_limit.unauthorized", detail=error.rule_detail)
            return JSONResponse(
                status_code=401,
                content={"code": error.code, "message": error.message},
            )
        case RateLimitError():
            retry_after = str(error.retry_after_seconds)
            return JSONResponse(
                status_code=429,
                content={
                    "code": error.code,
                    "message": f"Rate limit exceeded. Retry after {retry_after}s.",
                },
                headers={RETRY_AFTER: retry_after},
            )
        case TransportError() | ProtocolError():
            _log.error("rate_limit.store_unavailable", error=error.message)
        case _:
            _log.error("rate_limit.unexpected_error", error=repr(error))
    return JSONResponse(
        status_code=500,
        content={"code": "internal_error", "message": "Internal server error"},
    )


def rate_limit_headers(details: RequestAllowedDetails, response: Response) -> None:
    """Success handler publishing the store figures as ``X-RateLimit-*``."""
    response.headers[RATE_LIMIT_LIMIT] = str(details.details.limit)
    response.headers[RATE_LIMIT_REMAINING] = str(details.details.remaining)
    response.headers[RATE_LIMIT_RESET] = str(details.details.reset_after_seconds)


__all__ = [
    "RATE_LIMIT_LIMIT",
    "RATE_LIMIT_REMAINING",
    "RATE_LIMIT_RESET",
    "RETRY_AFTER",
    "default_error_handler",
    "rate_limit_headers",
]
