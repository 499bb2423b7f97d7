"""Typed tracker configuration.

Pydantic model validated once at tracker construction. Values come from
``get_tracker_config`` (defaults → file → env → overrides) or are passed
directly by the caller.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .defaults import (
    DEFAULT_AUTO_RESOLVE_LOW_SECONDS,
    DEFAULT_DISPATCH_WORKERS,
    DEFAULT_LOG_JSON,
    DEFAULT_MAX_HISTORY,
)


class TrackerConfig(BaseModel):
    """Runtime configuration for :class:`~error_tracker.tracker.ErrorTracker`.

    Attributes
    ----------
    max_history:
        Maximum number of records kept; the oldest are evicted beyond it.
    dispatch_workers:
        Worker threads running subscriber callbacks.
    auto_resolve_low_after_seconds:
        When set, LOW severity errors are resolved automatically after this
        many seconds. ``None`` disables auto-resolution.
    log_json:
        Emit JSON lines (True) or plain text (False) from tracker loggers.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    max_history: int = Field(default=DEFAULT_MAX_HISTORY, gt=0)
    dispatch_workers: int = Field(default=DEFAULT_DISPATCH_WORKERS, ge=1)
    auto_resolve_low_after_seconds: Optional[float] = Field(default=DEFAULT_AUTO_RESOLVE_LOW_SECONDS, gt=0)
    log_json: bool = DEFAULT_LOG_JSON


__all__ = ["TrackerConfig"]
