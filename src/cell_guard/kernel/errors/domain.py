"""Domain errors – invalid rate-limit values."""

from __future__ import annotations

from typing import Any

from cell_guard.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a value object invariant is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """A key or policy value does not meet its invariants.

    ``field`` names the offending attribute when known.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        if self.field is not None:
            base["field"] = self.field
        return base


__all__ = ["DomainError", "ValidationError"]
