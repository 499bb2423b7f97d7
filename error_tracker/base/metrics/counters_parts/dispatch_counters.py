"""Thread-safe in-memory counters for notification dispatch.

Tracks how many subscriber callbacks were scheduled, delivered, or failed.
Separated into its own file to comply with one-class-per-file governance.
"""

from __future__ import annotations

from threading import Condition, RLock
from typing import Any, Dict, Optional
import time

from .dispatch_counters_snapshot import DispatchCountersSnapshot


class DispatchCounters:
    """Thread-safe counters for subscriber callback invocations.

    ``wait_idle`` lets callers block until every scheduled callback has
    finished, which the dispatcher uses for graceful shutdown.
    """

    __slots__ = (
        "_lock",
        "_idle",
        "_dispatched",
        "_delivered",
        "_failed",
        "_in_flight",
        "_failure_by_type",
    )

    def __init__(self) -> None:
        self._lock = RLock()
        self._idle = Condition(self._lock)
        self._dispatched = 0
        self._delivered = 0
        self._failed = 0
        self._in_flight = 0
        self._failure_by_type: Dict[str, int] = {}

    @staticmethod
    def monotonic_ms() -> int:
        """Return current monotonic time in milliseconds."""
        return int(time.monotonic() * 1000)

    # -------------------------- Record Methods -------------------------- #
    def record_dispatch(self) -> None:
        """Record that a callback invocation was scheduled."""
        with self._lock:
            self._dispatched += 1
            self._in_flight += 1

    def record_delivered(self) -> None:
        """Record a callback that returned normally."""
        with self._lock:
            self._delivered += 1
            self._finish()

    def record_failure(self, error_type: str) -> None:
        """Record a callback that raised ``error_type``."""
        with self._lock:
            self._failed += 1
            self._failure_by_type[error_type] = self._failure_by_type.get(error_type, 0) + 1
            self._finish()

    def record_abandoned(self) -> None:
        """Record a scheduled callback that never ran (executor rejected it)."""
        with self._lock:
            self._finish()

    def _finish(self) -> None:
        self._in_flight = max(0, self._in_flight - 1)
        if self._in_flight == 0:
            self._idle.notify_all()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no callbacks are in flight; False if ``timeout`` elapsed."""
        with self._idle:
            return self._idle.wait_for(lambda: self._in_flight == 0, timeout=timeout)

    # -------------------------- Snapshot API -------------------------- #
    def snapshot(self) -> DispatchCountersSnapshot:
        """Return an immutable snapshot of current counters."""
        with self._lock:
            return DispatchCountersSnapshot(
                dispatched=self._dispatched,
                delivered=self._delivered,
                failed=self._failed,
                in_flight=self._in_flight,
                failure_by_type=dict(self._failure_by_type),
                generated_at_ms=self.monotonic_ms(),
            )

    def as_dict(self) -> Dict[str, Any]:
        """Convenience wrapper returning snapshot converted to dictionary."""
        return self.snapshot().to_dict()


__all__ = ["DispatchCounters"]
