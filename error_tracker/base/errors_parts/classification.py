"""
Classification helpers mapping exceptions to normalized categories/severities.

Implements the classifier policy table used by the tracker's ``report_*``
helpers, exception-type and HTTP status mapping, and message-based heuristics
as a fallback for exceptions that carry no structured hints.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

from ..safe_text import safe_str
from .error_category import ErrorCategory
from .error_severity import ErrorSeverity


# Severity policy for the classifier helpers. Database and timeout failures
# indicate system-level degradation; validation is expected and recoverable.
DATABASE_SEVERITY = ErrorSeverity.HIGH
NETWORK_SEVERITY = ErrorSeverity.MEDIUM
VALIDATION_SEVERITY = ErrorSeverity.LOW
RATE_LIMIT_SEVERITY = ErrorSeverity.MEDIUM
TIMEOUT_SEVERITY = ErrorSeverity.HIGH
PERMISSION_SEVERITY = ErrorSeverity.MEDIUM

_DEFAULT_SEVERITY: Dict[ErrorCategory, ErrorSeverity] = {
    ErrorCategory.DATABASE: DATABASE_SEVERITY,
    ErrorCategory.NETWORK: NETWORK_SEVERITY,
    ErrorCategory.VALIDATION: VALIDATION_SEVERITY,
    ErrorCategory.RATE_LIMIT: RATE_LIMIT_SEVERITY,
    ErrorCategory.TIMEOUT: TIMEOUT_SEVERITY,
    ErrorCategory.PERMISSION: PERMISSION_SEVERITY,
    ErrorCategory.AUTHENTICATION: ErrorSeverity.MEDIUM,
    ErrorCategory.PARSING: ErrorSeverity.LOW,
    ErrorCategory.RESOURCE: ErrorSeverity.HIGH,
    ErrorCategory.UNKNOWN: ErrorSeverity.MEDIUM,
}


def default_severity_for(category: ErrorCategory) -> ErrorSeverity:
    """Return the policy severity for ``category`` (``MEDIUM`` if unmapped)."""
    return _DEFAULT_SEVERITY.get(category, ErrorSeverity.MEDIUM)


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCategory] = {
    400: ErrorCategory.VALIDATION,
    401: ErrorCategory.AUTHENTICATION,
    403: ErrorCategory.PERMISSION,
    408: ErrorCategory.TIMEOUT,
    422: ErrorCategory.VALIDATION,
    429: ErrorCategory.RATE_LIMIT,
    502: ErrorCategory.NETWORK,
    503: ErrorCategory.NETWORK,
    504: ErrorCategory.TIMEOUT,
}


def _category_from_type(exc: BaseException) -> Optional[ErrorCategory]:
    """Map well-known builtin exception types to a category."""
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, PermissionError):
        return ErrorCategory.PERMISSION
    if isinstance(exc, ConnectionError):
        return ErrorCategory.NETWORK
    if isinstance(exc, (ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    if isinstance(exc, MemoryError):
        return ErrorCategory.RESOURCE
    if type(exc).__module__.split(".")[0] == "sqlite3":
        return ErrorCategory.DATABASE
    return None


def _heuristic_from_message(msg: str) -> Optional[ErrorCategory]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for exceptions without structured hints."""
    PATTERN_GROUPS = (
        (ErrorCategory.RATE_LIMIT, ("rate", "limit")),
        (ErrorCategory.TIMEOUT, ("timeout",)),
        (ErrorCategory.TIMEOUT, ("timed out",)),
        (ErrorCategory.DATABASE, ("database",)),
        (ErrorCategory.DATABASE, ("no such table",)),
        (ErrorCategory.DATABASE, ("constraint",)),
        (ErrorCategory.AUTHENTICATION, ("unauthorized",)),
        (ErrorCategory.AUTHENTICATION, ("api key",)),
        (ErrorCategory.PERMISSION, ("forbidden",)),
        (ErrorCategory.PERMISSION, ("permission",)),
        (ErrorCategory.NETWORK, ("connection",)),
        (ErrorCategory.NETWORK, ("unreachable",)),
        (ErrorCategory.PARSING, ("parse",)),
        (ErrorCategory.PARSING, ("json",)),
        (ErrorCategory.VALIDATION, ("validation",)),
        (ErrorCategory.VALIDATION, ("invalid",)),
        (ErrorCategory.RESOURCE, ("out of memory",)),
        (ErrorCategory.RESOURCE, ("disk full",)),
    )
    for category, patterns in PATTERN_GROUPS:
        if category is ErrorCategory.RATE_LIMIT and patterns == ("rate", "limit"):
            if all(p in msg for p in patterns):
                return category
            continue
        if any(p in msg for p in patterns):
            return category
    return None


def classify_exception(exc: BaseException) -> ErrorCategory:
    """Classify an exception into a normalized :class:`ErrorCategory`.

    Precedence:
        1. Builtin exception types (timeout, permission, connection, ...).
        2. HTTP status mapping.
        3. Substring heuristics on the message.
        4. ``UNKNOWN`` fallback.
    """
    category = _category_from_type(exc)
    if category is not None:
        return category
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    category = _heuristic_from_message(safe_str(exc).lower())
    return category if category is not None else ErrorCategory.UNKNOWN


__all__ = [
    "classify_exception",
    "default_severity_for",
    "DATABASE_SEVERITY",
    "NETWORK_SEVERITY",
    "VALIDATION_SEVERITY",
    "RATE_LIMIT_SEVERITY",
    "TIMEOUT_SEVERITY",
    "PERMISSION_SEVERITY",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
