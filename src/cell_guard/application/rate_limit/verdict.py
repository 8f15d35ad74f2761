"""Application rate limiting – Verdict, AllowedDetails, BlockedDetails."""
from __future__ import annotations

import dataclasses
from datetime import timedelta
from enum import Enum
from typing import Union


class RateLimitDecision(str, Enum):
    ALLOWED = "ALLOWED"
    BLOCKED = "BLOCKED"


@dataclasses.dataclass(frozen=True)
class AllowedDetails:
    """Store figures for a request that was let through."""
    limit: int
    remaining: int
    reset_after: timedelta

    @property
    def reset_after_seconds(self) -> int:
        return int(self.reset_after.total_seconds())


@dataclasses.dataclass(frozen=True)
class BlockedDetails:
    """Store figures for a request that was throttled."""
    retry_after: timedelta
    reset_after: timedelta
    limit: int = 0
    remaining: int = 0

    @property
    def retry_after_seconds(self) -> int:
        return int(self.retry_after.total_seconds())

    @property
    def reset_after_seconds(self) -> int:
        return int(self.reset_after.total_seconds())


@dataclasses.dataclass(frozen=True)
class Allowed:
    details: AllowedDetails
    decision = RateLimitDecision.ALLOWED

    @property
    def allowed(self) -> bool:
        return True


@dataclasses.dataclass(frozen=True)
class Blocked:
    details: BlockedDetails
    decision = RateLimitDecision.BLOCKED

    @property
    def allowed(self) -> bool:
        return False


Verdict = Union[Allowed, Blocked]


__all__ = [
    "Allowed",
    "AllowedDetails",
    "Blocked",
    "BlockedDetails",
    "RateLimitDecision",
    "Verdict",
]
