"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Request tracing middleware
- The discover service exception hierarchy
"""

from core.logging import configure_logging, get_logger, LoggerMixin
from core.errors import DiscoverError, InvalidOutcomeError, SessionNotFoundError

__all__ = [
    "configure_logging",
    "get_logger",
    "LoggerMixin",
    "DiscoverError",
    "InvalidOutcomeError",
    "SessionNotFoundError",
]
