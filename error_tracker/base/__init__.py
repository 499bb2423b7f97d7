"""
Error Tracker Base Package

Exports the tracker's inner layer: the error taxonomy, the record model,
validated filter DTOs, the in-memory store, statistics, notification
dispatch, and export helpers. Nothing here depends on the ``ErrorTracker``
facade, configuration loading, or process-level hooks.
"""

from .errors import (
    ErrorCategory,
    ErrorSeverity,
    ErrorTrackerError,
    DuplicateErrorIdError,
    TrackerClosedError,
    classify_exception,
    default_severity_for,
)
from .models import (
    ErrorContext,
    MetadataValue,
    StructuredError,
    ErrorStatsSummary,
    normalize_input,
)
from .dto import ErrorQuery, ClearCriteria, StatsWindow
from .store import ErrorStore
from .stats import compute_stats, window_start
from .notifications import NotificationDispatcher, Subscription
from .metrics import DispatchCounters, DispatchCountersSnapshot
from .export import export_records, export_json, export_csv, CSV_HEADER

__all__ = [
    # Taxonomy
    "ErrorCategory",
    "ErrorSeverity",
    "ErrorTrackerError",
    "DuplicateErrorIdError",
    "TrackerClosedError",
    "classify_exception",
    "default_severity_for",
    # Model
    "ErrorContext",
    "MetadataValue",
    "StructuredError",
    "ErrorStatsSummary",
    "normalize_input",
    # DTOs
    "ErrorQuery",
    "ClearCriteria",
    "StatsWindow",
    # Store / stats
    "ErrorStore",
    "compute_stats",
    "window_start",
    # Notifications
    "NotificationDispatcher",
    "Subscription",
    "DispatchCounters",
    "DispatchCountersSnapshot",
    # Export
    "export_records",
    "export_json",
    "export_csv",
    "CSV_HEADER",
]
