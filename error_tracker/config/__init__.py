"""Unified configuration layer for the error tracker.

Goals
-----
* Centralize defaults (history cap, dispatch workers, auto-resolution).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       ERROR_TRACKER_CONFIG_FILE
    3. Environment variables (ERROR_TRACKER_MAX_HISTORY, ...)
    4. In-code overrides passed to the helper
* Keep zero hard dependency on PyYAML (load YAML only if available).

External Config File (Optional)
-------------------------------
JSON is tried first; if that fails and PyYAML is installed, YAML. Keys may sit
at the top level or under an ``error_tracker`` section:

```
error_tracker:
  max_history: 5000
  dispatch_workers: 2
  auto_resolve_low_after_seconds: 5
```

Public API
----------
* get_tracker_config(overrides: dict | None = None) -> TrackerConfig
* reset_config_cache() -> None
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

from .env import (
    CONFIG_FILE_ENV,
    ENV_FIELD_MAP,
    parse_bool_env,
    parse_float_env,
    parse_int_env,
)
from .tracker_config import TrackerConfig

try:  # Optional YAML support
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None  # type: ignore

_SECTION = "error_tracker"
_FILE_CACHE: Dict[str, Dict[str, Any]] = {}


def _load_external_config() -> Dict[str, Any]:
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    if path in _FILE_CACHE:
        return _FILE_CACHE[path]
    p = Path(path)
    if not p.is_file():
        _FILE_CACHE[path] = {}
        return _FILE_CACHE[path]
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        _FILE_CACHE[path] = {}
        return _FILE_CACHE[path]
    data: Any = {}
    try:
        data = json.loads(text)
    except ValueError:
        if yaml is not None:  # pragma: no cover (depends on optional lib)
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError:
                data = {}
        else:
            data = {}
    if isinstance(data, dict) and isinstance(data.get(_SECTION), dict):
        data = data[_SECTION]
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE[path] = data
    return data


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    parsers = {
        "max_history": parse_int_env,
        "dispatch_workers": parse_int_env,
        "auto_resolve_low_after_seconds": parse_float_env,
        "log_json": parse_bool_env,
    }
    for field, env_name in ENV_FIELD_MAP.items():
        val = parsers[field](env_name)
        if val is not None:
            out[field] = val
    return out


def get_tracker_config(overrides: Optional[Dict[str, Any]] = None) -> TrackerConfig:
    """Return merged tracker configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides

    Raises:
        pydantic.ValidationError: If the merged values violate field bounds.
    """
    cfg: Dict[str, Any] = {}
    cfg |= _load_external_config()
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return TrackerConfig(**cfg)


def reset_config_cache() -> None:
    """Forget cached config file contents (tests and hot reload)."""
    _FILE_CACHE.clear()


__all__ = [
    "TrackerConfig",
    "get_tracker_config",
    "reset_config_cache",
]
