"""Testing support – fakes and property-based generators.

Usage::

    from cell_guard.testing import RecordingService, ScriptedConnection
"""

from cell_guard.testing.fakes import RecordingService, ScriptedConnection, ScriptedConnectionPool
from cell_guard.testing.generators import key_strategy, policy_strategy, reply_strategy

__all__ = [
    "RecordingService",
    "ScriptedConnection",
    "ScriptedConnectionPool",
    "key_strategy",
    "policy_strategy",
    "reply_strategy",
]
