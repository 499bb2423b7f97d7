"""Rolling-window statistics over stored errors.

Windows are rolling rather than calendar-aligned: ``"day"`` means the 24
hours before ``now``, not "since midnight". ``"all"`` covers every stored
record and reports an ``error_rate`` of 0.0 since it has no duration.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Optional

from ..dto import StatsWindow
from ..errors import ErrorCategory, ErrorSeverity
from ..models import ErrorStatsSummary, StructuredError

WINDOW_DURATIONS: Dict[str, Optional[timedelta]] = {
    "hour": timedelta(hours=1),
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "all": None,
}


def window_start(window: StatsWindow | str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Return the inclusive lower bound for ``window`` (``None`` for ``"all"``).

    Raises:
        ValueError: If ``window`` is not a known window label.
    """
    if window not in WINDOW_DURATIONS:
        raise ValueError(f"unknown stats window: {window!r} (expected one of {sorted(WINDOW_DURATIONS)})")
    duration = WINDOW_DURATIONS[window]
    if duration is None:
        return None
    return (now or datetime.now(timezone.utc)) - duration


def compute_stats(
    errors: Iterable[StructuredError],
    window: StatsWindow | str = "day",
    now: Optional[datetime] = None,
) -> ErrorStatsSummary:
    """Aggregate counts over the records of ``errors`` inside ``window``.

    Every category and severity member appears in the result, zero-filled.
    """
    now = now or datetime.now(timezone.utc)
    since = window_start(window, now)
    by_category: Dict[ErrorCategory, int] = {c: 0 for c in ErrorCategory}
    by_severity: Dict[ErrorSeverity, int] = {s: 0 for s in ErrorSeverity}
    total = 0
    unresolved = 0
    for error in errors:
        if since is not None and error.timestamp < since:
            continue
        total += 1
        if not error.resolved:
            unresolved += 1
        by_category[error.category] += 1
        by_severity[error.severity] += 1

    duration = WINDOW_DURATIONS[window]
    error_rate = total / duration.total_seconds() if duration else 0.0
    return ErrorStatsSummary(
        window=str(window),
        total=total,
        unresolved=unresolved,
        by_category=by_category,
        by_severity=by_severity,
        error_rate=error_rate,
        generated_at=now,
    )


__all__ = ["WINDOW_DURATIONS", "window_start", "compute_stats"]
