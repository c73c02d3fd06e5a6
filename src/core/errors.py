"""
Exception hierarchy for the discover service.

Queue conditions (empty queue, duplicate candidate, nothing to undo) are
not exceptions; they are reported through return values. The classes here
cover programming errors and lookups that the HTTP layer maps to status
codes.
"""

from typing import Any


class DiscoverError(Exception):
    """Base exception for all discover service errors."""

    def __init__(self, message: str, *, code: str = "DISCOVER_ERROR") -> None:
        super().__init__(message)
        self.code = code


class InvalidOutcomeError(DiscoverError):
    """A gesture outcome value that is not left, right or none."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Unknown gesture outcome: {value!r}", code="INVALID_OUTCOME")
        self.value = value


class SessionNotFoundError(DiscoverError):
    """No live session exists for the given id (never created or expired)."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session '{session_id}' not found", code="SESSION_NOT_FOUND")
        self.session_id = session_id
