"""Application rate limiting – Policy."""
from __future__ import annotations

import dataclasses
from datetime import timedelta

from cell_guard.kernel.errors import ValidationError

SECOND = timedelta(seconds=1)
MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)
DAY = timedelta(days=1)


@dataclasses.dataclass(frozen=True)
class Policy:
    """GCRA policy evaluated by the store.

    ``tokens`` requests are sustained per ``period``; ``burst`` extra
    requests may be taken at once; every request costs ``apply`` tokens.
    The store works in whole seconds, so ``period`` must be a whole number
    of seconds and at least one.

    Policies are values: the modifiers return a new instance::

        STRICT = Policy.per_hour(5).max_burst(2).named("strict")
    """

    tokens: int
    period: timedelta
    burst: int = 0
    apply: int = 1
    name: str | None = None

    def __post_init__(self) -> None:
        for field in ("tokens", "burst", "apply"):
            value = getattr(self, field)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"Policy.{field} must be an integer", field=field)
        if self.tokens <= 0:
            raise ValidationError("Policy.tokens must be > 0", field="tokens")
        if self.burst < 0:
            raise ValidationError("Policy.burst must be >= 0", field="burst")
        if self.apply <= 0:
            raise ValidationError("Policy.apply must be > 0", field="apply")
        if not isinstance(self.period, timedelta):
            raise ValidationError("Policy.period must be a timedelta", field="period")
        if self.period < SECOND:
            raise ValidationError("Policy.period must be at least one second", field="period")
        if self.period % SECOND:
            raise ValidationError("Policy.period must be a whole number of seconds", field="period")

    # -- factories -------------------------------------------------------

    @classmethod
    def per_period(cls, tokens: int, period: timedelta) -> "Policy":
        return cls(tokens=tokens, period=period)

    @classmethod
    def per_second(cls, tokens: int) -> "Policy":
        return cls.per_period(tokens, SECOND)

    @classmethod
    def per_minute(cls, tokens: int) -> "Policy":
        return cls.per_period(tokens, MINUTE)

    @classmethod
    def per_hour(cls, tokens: int) -> "Policy":
        return cls.per_period(tokens, HOUR)

    @classmethod
    def per_day(cls, tokens: int) -> "Policy":
        return cls.per_period(tokens, DAY)

    # -- modifiers -------------------------------------------------------

    def max_burst(self, burst: int) -> "Policy":
        return dataclasses.replace(self, burst=burst)

    def apply_tokens(self, apply: int) -> "Policy":
        return dataclasses.replace(self, apply=apply)

    def named(self, name: str) -> "Policy":
        return dataclasses.replace(self, name=name)

    # -- views -----------------------------------------------------------

    @property
    def period_seconds(self) -> int:
        return self.period // SECOND

    @property
    def label(self) -> str:
        text = f"{self.tokens} req/{self.period_seconds}s"
        if self.burst:
            text = f"{text} (burst {self.burst})"
        return text


__all__ = ["DAY", "HOUR", "MINUTE", "Policy", "SECOND"]
