"""Application rate limiting – policy, rule and verdict values plus the wire codec."""
from cell_guard.application.rate_limit.codec import COMMAND_NAME, decode, decode_arguments, encode
from cell_guard.application.rate_limit.policy import Policy
from cell_guard.application.rate_limit.rule import (
    RequestAllowedDetails,
    RequestBlockedDetails,
    Rule,
    RuleProvider,
)
from cell_guard.application.rate_limit.verdict import (
    Allowed,
    AllowedDetails,
    Blocked,
    BlockedDetails,
    RateLimitDecision,
    Verdict,
)

__all__ = [
    "COMMAND_NAME",
    "Allowed",
    "AllowedDetails",
    "Blocked",
    "BlockedDetails",
    "Policy",
    "RateLimitDecision",
    "RequestAllowedDetails",
    "RequestBlockedDetails",
    "Rule",
    "RuleProvider",
    "Verdict",
    "decode",
    "decode_arguments",
    "encode",
]
