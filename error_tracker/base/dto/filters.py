"""
Pydantic DTOs describing store query, cleanup, and stats-window criteria.

Purpose
-------
Validate filter configurations at the edge before they reach the store so
that ``query``/``clear`` operate on well-typed predicates. Absent fields mean
"no constraint on that field"; supplied fields are ANDed.

Failure modes
-------------
Construction raises ``pydantic.ValidationError`` for non-positive limits,
naive datetimes, and unknown category/severity names. Matching never raises.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..errors import ErrorCategory, ErrorSeverity
from ..models import StructuredError

StatsWindow = Literal["hour", "day", "week", "all"]


def _match_member(enum_cls: Any, value: Any) -> Any:
    """Accept enum names (``"DATABASE"``) alongside values (``"database"``)."""
    if isinstance(value, str) and not isinstance(value, enum_cls):
        for member in enum_cls:
            if value.strip().upper() == member.name or value.strip().lower() == member.value:
                return member
    return value


def _require_aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC recommended)")
    return value


class ErrorQuery(BaseModel):
    """Query criteria for stored errors.

    Attributes:
        category: Only errors in this category.
        severity: Only errors at exactly this severity.
        resolved: Only errors whose resolution state equals this flag.
        since: Only errors with ``timestamp >= since``.
        limit: Keep the first ``limit`` matches (insertion order).
    """

    model_config = ConfigDict(frozen=True)

    category: Optional[ErrorCategory] = None
    severity: Optional[ErrorSeverity] = None
    resolved: Optional[bool] = None
    since: Optional[datetime] = None
    limit: Optional[int] = Field(default=None, gt=0)

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Any:
        return _match_member(ErrorCategory, value)

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Any) -> Any:
        return _match_member(ErrorSeverity, value)

    @field_validator("since")
    @classmethod
    def _aware_since(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _require_aware(value)

    def matches(self, error: StructuredError) -> bool:
        """Return True when ``error`` satisfies every supplied predicate."""
        if self.category is not None and error.category is not self.category:
            return False
        if self.severity is not None and error.severity is not self.severity:
            return False
        if self.resolved is not None and error.resolved is not self.resolved:
            return False
        if self.since is not None and error.timestamp < self.since:
            return False
        return True


class ClearCriteria(BaseModel):
    """Removal criteria for stored errors.

    A record is removed iff it matches every supplied field; with no fields
    supplied every record matches.

    Attributes:
        resolved: Only remove errors whose resolution state equals this flag.
        older_than: Only remove errors with ``timestamp < older_than``.
    """

    model_config = ConfigDict(frozen=True)

    resolved: Optional[bool] = None
    older_than: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("older_than", "olderThan")
    )

    @field_validator("older_than")
    @classmethod
    def _aware_older_than(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _require_aware(value)

    def matches(self, error: StructuredError) -> bool:
        if self.resolved is not None and error.resolved is not self.resolved:
            return False
        if self.older_than is not None and error.timestamp >= self.older_than:
            return False
        return True


__all__ = ["StatsWindow", "ErrorQuery", "ClearCriteria"]
