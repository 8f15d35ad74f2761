"""Kernel – 100% framework-agnostic building blocks."""

from cell_guard.kernel.errors import (
    ApplicationError,
    BaseError,
    DomainError,
    InfrastructureError,
    ProtocolError,
    RateLimitError,
    RuleProvisionError,
    TransportError,
    ValidationError,
)
from cell_guard.kernel.types import Key, KeyKind

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "InfrastructureError",
    "Key",
    "KeyKind",
    "ProtocolError",
    "RateLimitError",
    "RuleProvisionError",
    "TransportError",
    "ValidationError",
]
