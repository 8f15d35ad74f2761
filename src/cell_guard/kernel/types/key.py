"""Rate-limit key value object."""

from __future__ import annotations

import dataclasses
import uuid
from enum import Enum
from typing import Union

from cell_guard.kernel.errors.domain import ValidationError

KeyValue = Union[str, int, uuid.UUID]


class KeyKind(str, Enum):
    TEXT = "text"
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    UUID = "uuid"


@dataclasses.dataclass(frozen=True, slots=True)
class Key:
    """Opaque identifier a rule is charged against (API key, user id, IP, …).

    Exactly one variant is populated; ``kind`` names it.  ``str(key)`` is
    both the display form and the argument sent to the store.

    Examples::

        Key.text("user123")
        Key.unsigned(42)
        Key.of(uuid.uuid4())
    """

    kind: KeyKind
    value: KeyValue

    def __post_init__(self) -> None:
        if isinstance(self.value, bool):
            raise ValidationError("Key must not be a bool", field="value")
        if self.kind is KeyKind.TEXT:
            if not isinstance(self.value, str):
                raise ValidationError("Text key must be a string", field="value")
        elif self.kind is KeyKind.UNSIGNED:
            if not isinstance(self.value, int) or self.value < 0:
                raise ValidationError("Unsigned key must be an integer >= 0", field="value")
        elif self.kind is KeyKind.SIGNED:
            if not isinstance(self.value, int):
                raise ValidationError("Signed key must be an integer", field="value")
        elif not isinstance(self.value, uuid.UUID):
            raise ValidationError("UUID key must be a uuid.UUID", field="value")

    @classmethod
    def text(cls, value: str) -> "Key":
        return cls(KeyKind.TEXT, value)

    @classmethod
    def unsigned(cls, value: int) -> "Key":
        return cls(KeyKind.UNSIGNED, value)

    @classmethod
    def signed(cls, value: int) -> "Key":
        return cls(KeyKind.SIGNED, value)

    @classmethod
    def uuid(cls, value: uuid.UUID) -> "Key":
        return cls(KeyKind.UUID, value)

    @classmethod
    def of(cls, value: "Key | KeyValue") -> "Key":
        """Coerce a raw value into a ``Key``.

        ``str`` becomes a text key, non-negative ``int`` an unsigned key,
        negative ``int`` a signed key and ``uuid.UUID`` a UUID key.
        """
        if isinstance(value, Key):
            return value
        if isinstance(value, bool):
            raise ValidationError("Key must not be a bool", field="value")
        if isinstance(value, str):
            return cls.text(value)
        if isinstance(value, int):
            return cls.unsigned(value) if value >= 0 else cls.signed(value)
        if isinstance(value, uuid.UUID):
            return cls.uuid(value)
        raise ValidationError(
            f"Cannot build a Key from {type(value).__name__}", field="value"
        )

    def __str__(self) -> str:
        return str(self.value)


__all__ = ["Key", "KeyKind", "KeyValue"]
