"""Application rate limiting – CL.THROTTLE command codec.

Wire contract with the Redis Cell module::

    CL.THROTTLE <key> <max_burst> <count per period> <period seconds> <quantity>

    1) (integer) 0    # 0 allowed, 1 blocked
    2) (integer) 16   # X-RateLimit-Limit
    3) (integer) 15   # X-RateLimit-Remaining
    4) (integer) -1   # Retry-After seconds, -1 unless blocked
    5) (integer) 2    # X-RateLimit-Reset seconds

Argument order and units must not change.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta
from typing import Any

from cell_guard.application.rate_limit.policy import Policy
from cell_guard.application.rate_limit.verdict import (
    Allowed,
    AllowedDetails,
    Blocked,
    BlockedDetails,
    Verdict,
)
from cell_guard.kernel.errors import ProtocolError, ValidationError
from cell_guard.kernel.types import Key, KeyValue

COMMAND_NAME = "CL.THROTTLE"
REPLY_ARITY = 5

Command = tuple[str, str, int, int, int, int]


def encode(key: Key | KeyValue, policy: Policy) -> Command:
    """Build the argument list for one check-and-charge."""
    return (
        COMMAND_NAME,
        str(Key.of(key)),
        policy.burst,
        policy.tokens,
        policy.period_seconds,
        policy.apply,
    )


def decode_arguments(command: Sequence[Any]) -> tuple[str, Policy]:
    """Parse an encoded command back into ``(key, policy)``.

    Accepts the ``bytes``/``str`` forms a store client may log or echo.
    """
    if len(command) != 6:
        raise ValidationError(f"{COMMAND_NAME} takes 5 arguments, got {len(command) - 1}")
    name, key, burst, tokens, period, apply = (
        item.decode() if isinstance(item, bytes) else item for item in command
    )
    if str(name).upper() != COMMAND_NAME:
        raise ValidationError(f"Not a {COMMAND_NAME} command: {name!r}")
    try:
        policy = Policy(
            tokens=int(tokens),
            period=timedelta(seconds=int(period)),
            burst=int(burst),
            apply=int(apply),
        )
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed {COMMAND_NAME} arguments: {exc}") from exc
    return str(key), policy


def decode(reply: Any) -> Verdict:
    """Turn a ``CL.THROTTLE`` reply into a :data:`Verdict`.

    Raises :class:`~cell_guard.kernel.errors.ProtocolError` on any reply
    that is not five integers with a 0/1 blocked flag.
    """
    if isinstance(reply, (str, bytes)) or not isinstance(reply, Sequence):
        raise ProtocolError(
            f"Expected an array reply from {COMMAND_NAME}, got {type(reply).__name__}",
            reply=reply,
        )
    if len(reply) != REPLY_ARITY:
        raise ProtocolError(
            f"Expected {REPLY_ARITY} elements from {COMMAND_NAME}, got {len(reply)}",
            reply=reply,
        )
    for position, item in enumerate(reply):
        if isinstance(item, bool) or not isinstance(item, int):
            raise ProtocolError(
                f"Element {position} of {COMMAND_NAME} reply is not an integer: {item!r}",
                reply=reply,
            )

    blocked, limit, remaining, retry_after, reset_after = reply
    if blocked == 1:
        if retry_after < 0:
            raise ProtocolError(
                f"Blocked {COMMAND_NAME} reply carries retry_after={retry_after}",
                reply=reply,
            )
        return Blocked(
            BlockedDetails(
                retry_after=timedelta(seconds=retry_after),
                reset_after=timedelta(seconds=reset_after),
                limit=limit,
                remaining=remaining,
            )
        )
    if blocked == 0:
        return Allowed(
            AllowedDetails(
                limit=limit,
                remaining=remaining,
                reset_after=timedelta(seconds=reset_after),
            )
        )
    raise ProtocolError(
        f"Blocked flag of {COMMAND_NAME} reply must be 0 or 1, got {blocked}",
        reply=reply,
    )


__all__ = ["COMMAND_NAME", "Command", "REPLY_ARITY", "decode", "decode_arguments", "encode"]
