"""Canonical normalized error record.

:class:`StructuredError` is the uniform record produced for every reported
failure. All fields are fixed at construction except the resolution pair
(``resolved``/``resolution``), which transitions exactly once via
:meth:`StructuredError.mark_resolved`. Callers mutate records only through the
store's ``resolve`` so the transition happens under the store lock.
"""
from __future__ import annotations

import itertools
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

from ..errors import ErrorCategory, ErrorSeverity
from ..log_support.json_formatter import ISO
from .error_context import ErrorContext
from .raw_input import FaultInput, normalize_input

_ID_LOCK = threading.Lock()
_ID_SEQUENCE = itertools.count(1)


def generate_error_id() -> str:
    """Return a fresh error id of the form ``err_<epoch-ms>_<random>_<seq>``.

    The process-local sequence suffix keeps ids distinct across concurrent
    callers even when the millisecond clock and random part collide.
    """
    with _ID_LOCK:
        seq = next(_ID_SEQUENCE)
    return f"err_{int(time.time() * 1000)}_{uuid4().hex[:9]}_{seq}"


def format_timestamp(ts: datetime) -> str:
    """Serialize ``ts`` as an ISO-8601 UTC string with a ``Z`` suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime(ISO)


@dataclass(frozen=True)
class StructuredError:
    """Normalized failure record.

    Attributes:
        id: Unique identifier, never reused within a process.
        timestamp: Timezone-aware UTC creation instant.
        message: Human-readable description.
        category: Domain classification.
        severity: Urgency classification.
        context: Named context fields plus metadata.
        original_error: Underlying exception, shared read-only.
        stack_trace: Formatted traceback when the input carried one.
        resolved: Whether the error has been resolved (monotonic).
        resolution: Explanation attached by the first successful resolve.
    """

    id: str
    timestamp: datetime
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    context: ErrorContext = field(default_factory=ErrorContext)
    original_error: Optional[BaseException] = field(default=None, compare=False, repr=False)
    stack_trace: Optional[str] = field(default=None, repr=False)
    resolved: bool = False
    resolution: Optional[str] = None

    @classmethod
    def create(
        cls,
        raw: Any,
        category: ErrorCategory,
        severity: ErrorSeverity,
        context: "ErrorContext | Mapping[str, Any] | None" = None,
    ) -> "StructuredError":
        """Build a new record from raw input with a fresh id and timestamp."""
        normalized = normalize_input(raw)
        ctx = ErrorContext().merged(context)
        if isinstance(normalized, FaultInput):
            return cls(
                id=generate_error_id(),
                timestamp=datetime.now(timezone.utc),
                message=normalized.description,
                category=category,
                severity=severity,
                context=ctx,
                original_error=normalized.error,
                stack_trace=normalized.trace,
            )
        return cls(
            id=generate_error_id(),
            timestamp=datetime.now(timezone.utc),
            message=normalized.text,
            category=category,
            severity=severity,
            context=ctx,
        )

    def __hash__(self) -> int:
        # id is immutable; metadata dicts and the resolved flag are not hashable state
        return hash(self.id)

    def mark_resolved(self, resolution: str) -> bool:
        """Transition to resolved once; return ``False`` if already resolved."""
        if self.resolved:
            return False
        object.__setattr__(self, "resolution", resolution)
        object.__setattr__(self, "resolved", True)
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable mapping of every field."""
        original: Optional[Dict[str, str]] = None
        if self.original_error is not None:
            original = {
                "type": type(self.original_error).__name__,
                "message": self.message,
            }
        return {
            "id": self.id,
            "timestamp": format_timestamp(self.timestamp),
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context.to_dict(),
            "stack_trace": self.stack_trace,
            "original_error": original,
            "resolved": self.resolved,
            "resolution": self.resolution,
        }


__all__ = ["StructuredError", "generate_error_id", "format_timestamp"]
