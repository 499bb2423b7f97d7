"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `error_tracker.base.errors` for the stable surface.
"""

from .error_category import ErrorCategory
from .error_severity import ErrorSeverity
from .tracker_error import ErrorTrackerError, DuplicateErrorIdError, TrackerClosedError
from .classification import classify_exception, default_severity_for

__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "ErrorTrackerError",
    "DuplicateErrorIdError",
    "TrackerClosedError",
    "classify_exception",
    "default_severity_for",
]
