"""
Normalized error categories (taxonomy).

Defines the `ErrorCategory` enumeration used to classify tracked errors by
domain. Values are lowercase snake_case and are considered a stable public
contract for logging, statistics keys, and exports.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorCategory(str, Enum):
    """Enumerated error categories representing the failing domain."""

    DATABASE = "database"
    NETWORK = "network"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    PERMISSION = "permission"
    PARSING = "parsing"
    TIMEOUT = "timeout"
    RESOURCE = "resource"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, value: Any, default: Optional["ErrorCategory"] = None) -> "ErrorCategory":
        """Return the member matching ``value`` by identity, value, or name.

        Unknown inputs map to ``default`` (``UNKNOWN`` when not given) so that
        reporting paths never fail on a bad category.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for member in cls:
                if key.lower() == member.value or key.upper() == member.name:
                    return member
        return default if default is not None else cls.UNKNOWN


__all__ = ["ErrorCategory"]
