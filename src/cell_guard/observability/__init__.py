"""Observability – structured logging."""

from cell_guard.observability.logging import JsonLoggerFactory, RuleContextProcessor, get_logger

__all__ = ["JsonLoggerFactory", "RuleContextProcessor", "get_logger"]
