"""
Exception types raised by the error tracker itself.

The tracker represents *tracked* failures as data (``StructuredError``); these
exceptions are reserved for caller misuse and internal invariant guards.
"""
from __future__ import annotations


class ErrorTrackerError(Exception):
    """Base class for exceptions raised by the error tracker library."""


class DuplicateErrorIdError(ErrorTrackerError):
    """Raised when a record with an already-stored id is inserted."""

    def __init__(self, error_id: str) -> None:
        super().__init__(f"error id already stored: {error_id}")
        self.error_id = error_id


class TrackerClosedError(ErrorTrackerError):
    """Raised when subscribing on a tracker or dispatcher after teardown."""


__all__ = ["ErrorTrackerError", "DuplicateErrorIdError", "TrackerClosedError"]
