"""Testing fakes – in-memory doubles for the store and the inner service."""
from cell_guard.testing.fakes.connection import ScriptedConnection, ScriptedConnectionPool
from cell_guard.testing.fakes.service import RecordingService

__all__ = ["RecordingService", "ScriptedConnection", "ScriptedConnectionPool"]
