"""Infrastructure errors – store I/O and wire-protocol failures."""

from __future__ import annotations

from typing import Any

from cell_guard.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a rate-limit outcome."""

    default_code = "infrastructure_error"


class TransportError(InfrastructureError):
    """The store could not be reached or rejected the command."""

    default_code = "transport_error"

    def __init__(
        self,
        message: str | None = None,
        *,
        resource: str = "rate-limit store",
        **kwargs: Any,
    ) -> None:
        cause = kwargs.get("cause")
        if message is None:
            message = f"Could not talk to '{resource}'"
            if cause is not None:
                message = f"{message}: {cause}"
        super().__init__(message, **kwargs)
        self.resource = resource


class ProtocolError(InfrastructureError):
    """The store replied with something other than the expected shape."""

    default_code = "protocol_violation"

    def __init__(self, message: str, *, reply: Any = None, **kwargs: Any) -> None:
        super().__init__(message, detail={"reply": repr(reply)}, **kwargs)
        self.reply = reply


__all__ = ["InfrastructureError", "ProtocolError", "TransportError"]
