"""error_tracker package.

Structured, in-memory error tracking for long-running services: failures
are normalized into uniform records, classified by category and severity,
queried, resolved, aggregated, exported, and pushed to severity subscribers.

Typical entry point is :class:`error_tracker.tracker.ErrorTracker`.
"""

from .base import (
    ErrorCategory,
    ErrorSeverity,
    ErrorTrackerError,
    DuplicateErrorIdError,
    TrackerClosedError,
    ErrorContext,
    StructuredError,
    ErrorStatsSummary,
    ErrorQuery,
    ClearCriteria,
    Subscription,
    classify_exception,
    export_records,
)
from .config import TrackerConfig, get_tracker_config
from .tracker import ErrorTracker

__version__ = "0.1.0"

__all__ = [
    "ErrorTracker",
    "TrackerConfig",
    "get_tracker_config",
    "ErrorCategory",
    "ErrorSeverity",
    "ErrorTrackerError",
    "DuplicateErrorIdError",
    "TrackerClosedError",
    "ErrorContext",
    "StructuredError",
    "ErrorStatsSummary",
    "ErrorQuery",
    "ClearCriteria",
    "Subscription",
    "classify_exception",
    "export_records",
    "__version__",
]
