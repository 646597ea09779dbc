"""
Exception hierarchy for the drift engine.
"""

from __future__ import annotations


class DriftError(Exception):
    """Base class for drift engine errors."""


class MalformedPersistedData(DriftError):
    """Stored state could not be decoded. Always recovered by the stores."""


class EmptyWordPoolError(DriftError):
    """The word pool has no entries to sample from."""


class InsufficientWordPoolError(EmptyWordPoolError):
    """The word pool is too small to start a session."""

    def __init__(self, size: int, minimum: int = 2):
        self.size = size
        self.minimum = minimum
        super().__init__(f"Need at least {minimum} words to start a session, got {size}")


class SessionNotRunningError(DriftError):
    """An operation needs a running session."""


class QuestionAlreadyAnsweredError(DriftError):
    """The outstanding question already has a verdict."""
