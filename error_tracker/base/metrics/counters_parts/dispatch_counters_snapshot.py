"""Dispatch counters snapshot dataclass.

Immutable snapshot of notification dispatch counters, designed for
serialization and logging. Split into its own file to satisfy
one-class-per-file governance.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class DispatchCountersSnapshot:
    """Immutable point-in-time snapshot of dispatcher counters.

    Attributes:
        dispatched: Callback invocations scheduled.
        delivered: Callbacks that returned normally.
        failed: Callbacks that raised.
        in_flight: Scheduled callbacks not yet finished.
        failure_by_type: Failure counts keyed by exception class name.
        generated_at_ms: Monotonic timestamp of the snapshot.
    """

    dispatched: int
    delivered: int
    failed: int
    in_flight: int
    failure_by_type: Dict[str, int]
    generated_at_ms: int

    def to_dict(self) -> Dict[str, Any]:  # convenience
        """Return a dictionary representation suitable for JSON serialization."""
        return asdict(self)


__all__ = ["DispatchCountersSnapshot"]
