"""Kernel value types."""
from cell_guard.kernel.types.key import Key, KeyKind, KeyValue

__all__ = ["Key", "KeyKind", "KeyValue"]
