"""
Error severity levels ordered by escalation importance.

`ErrorSeverity` is orthogonal to `ErrorCategory`: it signals urgency rather
than domain. Members compare by rank (LOW < MEDIUM < HIGH < CRITICAL) instead
of by their string values.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorSeverity(str, Enum):
    """Enumerated severity levels with rank-based ordering."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Zero-based escalation rank (LOW is 0, CRITICAL is 3)."""
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ErrorSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, ErrorSeverity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, ErrorSeverity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, ErrorSeverity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def coerce(cls, value: Any, default: Optional["ErrorSeverity"] = None) -> "ErrorSeverity":
        """Return the member matching ``value`` by identity, value, or name.

        Unknown inputs map to ``default`` (``MEDIUM`` when not given).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for member in cls:
                if key.lower() == member.value or key.upper() == member.name:
                    return member
        return default if default is not None else cls.MEDIUM


_RANKS = {
    ErrorSeverity.LOW: 0,
    ErrorSeverity.MEDIUM: 1,
    ErrorSeverity.HIGH: 2,
    ErrorSeverity.CRITICAL: 3,
}


__all__ = ["ErrorSeverity"]
