"""error_tracker.config.env
======================

Environment variable names and parsing helpers for tracker configuration.

Failure Modes
-------------
Helpers never raise on unset or malformed variables; they return ``None`` so
the caller falls back to file or default values.
"""

from __future__ import annotations

import os
from typing import Dict, Optional

CONFIG_FILE_ENV = "ERROR_TRACKER_CONFIG_FILE"

# Config field → environment variable
ENV_FIELD_MAP: Dict[str, str] = {
    "max_history": "ERROR_TRACKER_MAX_HISTORY",
    "dispatch_workers": "ERROR_TRACKER_DISPATCH_WORKERS",
    "auto_resolve_low_after_seconds": "ERROR_TRACKER_AUTO_RESOLVE_LOW_SECONDS",
    "log_json": "ERROR_TRACKER_LOG_JSON",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_int_env(name: str) -> Optional[int]:
    """Return the integer value of env var ``name`` or None if unset/invalid."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def parse_float_env(name: str) -> Optional[float]:
    """Return the float value of env var ``name`` or None if unset/invalid."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.strip())
    except ValueError:
        return None


def parse_bool_env(name: str) -> Optional[bool]:
    """Return True/False for common truthy/falsy spellings, else None."""
    raw = os.getenv(name)
    if raw is None:
        return None
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    return None


__all__ = [
    "CONFIG_FILE_ENV",
    "ENV_FIELD_MAP",
    "parse_int_env",
    "parse_float_env",
    "parse_bool_env",
]
