"""Structured context object for error tracker logging events.

This module defines :class:`ErrorLogContext`, a dataclass used to carry the
common fields of tracker log events (error id, category, severity and extra
metadata). Its ``to_dict`` helper merges the ``extra`` mapping and prunes
``None`` values for clean structured output.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class ErrorLogContext:
    """Structured context for tracker logging events."""

    error_id: Optional[str] = None
    category: Optional[str] = None
    severity: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_error(cls, error: Any, **extra: Any) -> "ErrorLogContext":
        """Build a context from any object exposing ``id``/``category``/``severity``."""
        category = getattr(error, "category", None)
        severity = getattr(error, "severity", None)
        return cls(
            error_id=getattr(error, "id", None),
            category=getattr(category, "value", category),
            severity=getattr(severity, "value", severity),
            extra=dict(extra),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["ErrorLogContext"]
