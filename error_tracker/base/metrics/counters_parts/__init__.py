"""One-class-per-file parts for notification dispatch counters."""

from .dispatch_counters_snapshot import DispatchCountersSnapshot
from .dispatch_counters import DispatchCounters

__all__ = [
    "DispatchCountersSnapshot",
    "DispatchCounters",
]
