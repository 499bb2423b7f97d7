"""Error statistics summary dataclass.

Immutable point-in-time aggregate over the records inside a stats window.
Split into its own file to satisfy one-class-per-file governance.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from ..errors import ErrorCategory, ErrorSeverity
from .structured_error import format_timestamp


@dataclass(frozen=True)
class ErrorStatsSummary:
    """Immutable snapshot of error counts over a time window.

    ``by_category`` and ``by_severity`` always contain every enumeration
    member, with zero counts included.
    """

    window: str
    total: int
    unresolved: int
    by_category: Dict[ErrorCategory, int]
    by_severity: Dict[ErrorSeverity, int]
    error_rate: float
    generated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Return a dictionary keyed by enum values, suitable for JSON."""
        return {
            "window": self.window,
            "total": self.total,
            "unresolved": self.unresolved,
            "by_category": {k.value: v for k, v in self.by_category.items()},
            "by_severity": {k.value: v for k, v in self.by_severity.items()},
            "error_rate": self.error_rate,
            "generated_at": format_timestamp(self.generated_at),
        }


__all__ = ["ErrorStatsSummary"]
