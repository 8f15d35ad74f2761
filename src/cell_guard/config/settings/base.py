"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar


@dataclasses.dataclass
class Settings:
    """Base for the ``CELL_GUARD_*`` settings groups.

    Subclasses set ``_prefix`` and declare their options as dataclass fields;
    ``RedisSettings.url`` is read from ``CELL_GUARD_REDIS_URL``.  Values are
    checked in ``_validate`` as soon as the instance is built.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    @classmethod
    def env_var(cls, field_name: str) -> str:
        """Environment variable that carries *field_name*."""
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    def _validate(self) -> None:
        """Raise ``InvalidSettingValueError`` for unusable values."""


__all__ = ["Settings"]
