"""Config settings – store and default-policy settings."""
from __future__ import annotations

import dataclasses
from datetime import timedelta

from cell_guard.application.rate_limit.policy import Policy
from cell_guard.config.settings.base import Settings
from cell_guard.config.validation import InvalidSettingValueError
from cell_guard.kernel.errors import ValidationError


@dataclasses.dataclass
class RedisSettings(Settings):
    """Connection settings for a Redis / Valkey server with Redis Cell loaded."""

    _prefix = "CELL_GUARD_REDIS"

    url: str = "redis://localhost:6379/0"
    max_connections: int | None = None
    socket_timeout: float | None = None

    def _validate(self) -> None:
        if not self.url.startswith(("redis://", "rediss://", "unix://")):
            raise InvalidSettingValueError("url", self.url, "expected a redis://, rediss:// or unix:// URL")
        if self.max_connections is not None and self.max_connections <= 0:
            raise InvalidSettingValueError("max_connections", self.max_connections, "must be > 0")
        if self.socket_timeout is not None and self.socket_timeout <= 0:
            raise InvalidSettingValueError("socket_timeout", self.socket_timeout, "must be > 0")


@dataclasses.dataclass
class PolicySettings(Settings):
    """Default policy, e.g. ``CELL_GUARD_POLICY_TOKENS=30``,
    ``CELL_GUARD_POLICY_PERIOD_SECONDS=60``."""

    _prefix = "CELL_GUARD_POLICY"

    tokens: int = 30
    period_seconds: int = 60
    burst: int = 0
    apply: int = 1
    name: str | None = None

    def _validate(self) -> None:
        self.to_policy()

    def to_policy(self) -> Policy:
        try:
            return Policy(
                tokens=self.tokens,
                period=timedelta(seconds=self.period_seconds),
                burst=self.burst,
                apply=self.apply,
                name=self.name,
            )
        except ValidationError as exc:
            field = exc.field or "policy"
            if field == "period":
                field = "period_seconds"
            raise InvalidSettingValueError(field, getattr(self, field, None), exc.message) from exc


__all__ = ["PolicySettings", "RedisSettings"]
