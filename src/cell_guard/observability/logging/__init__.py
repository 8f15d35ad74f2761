"""Observability – structured logging helpers."""
from cell_guard.observability.logging.factory import JsonLoggerFactory
from cell_guard.observability.logging.processors import RuleContextProcessor, get_logger

__all__ = ["JsonLoggerFactory", "RuleContextProcessor", "get_logger"]
