"""Testing generators – Hypothesis strategies for keys, policies and replies."""
from cell_guard.testing.generators.strategies import key_strategy, policy_strategy, reply_strategy

__all__ = ["key_strategy", "policy_strategy", "reply_strategy"]
