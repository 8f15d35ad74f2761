"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   └── ValidationError
    ├── ApplicationError     (application.py)
    │   ├── RuleProvisionError
    │   └── RateLimitError
    └── InfrastructureError  (infrastructure.py)
        ├── TransportError
        └── ProtocolError
"""

from cell_guard.kernel.errors.application import (
    ApplicationError,
    RateLimitError,
    RuleProvisionError,
)
from cell_guard.kernel.errors.base import BaseError
from cell_guard.kernel.errors.domain import DomainError, ValidationError
from cell_guard.kernel.errors.infrastructure import (
    InfrastructureError,
    ProtocolError,
    TransportError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "InfrastructureError",
    "ProtocolError",
    "RateLimitError",
    "RuleProvisionError",
    "TransportError",
    "ValidationError",
]
