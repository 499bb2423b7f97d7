"""Notification dispatch metrics package.

Exports dispatch counters and their snapshots.
"""

from .counters_parts import DispatchCounters, DispatchCountersSnapshot

__all__ = [
    "DispatchCounters",
    "DispatchCountersSnapshot",
]
