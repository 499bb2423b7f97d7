"""Unified error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``error_tracker.base.errors_parts`` to maintain a stable import path while
enforcing the one-class-per-file governance rule.
"""

from .errors_parts.error_category import ErrorCategory
from .errors_parts.error_severity import ErrorSeverity
from .errors_parts.tracker_error import (
    ErrorTrackerError,
    DuplicateErrorIdError,
    TrackerClosedError,
)
from .errors_parts.classification import classify_exception, default_severity_for

__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "ErrorTrackerError",
    "DuplicateErrorIdError",
    "TrackerClosedError",
    "classify_exception",
    "default_severity_for",
]
