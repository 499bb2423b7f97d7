"""Pytest configuration for the error tracker test suite.

Provides an isolated environment (no ``ERROR_TRACKER_*`` variables, empty
config file cache), a tracker fixture that is always torn down, and a helper
that captures structured log events emitted under the ``error_tracker``
logger.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Iterator, List

import pytest

from error_tracker.base.logging import BASE_LOGGER_NAME, get_logger
from error_tracker.config import TrackerConfig, reset_config_cache
from error_tracker.tracker import ErrorTracker


class _EventCollector(logging.Handler):
    """Collect ``log_event`` payloads (JSON messages) as dictionaries."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            payload = {"msg": record.getMessage()}
        if not isinstance(payload, dict):
            payload = {"msg": payload}
        payload.setdefault("level", record.levelname)
        payload["_levelno"] = record.levelno
        self.events.append(payload)

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("event") == event]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip tracker env vars and forget cached config files around each test."""

    for name in list(os.environ):
        if name.startswith("ERROR_TRACKER_"):
            monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def events() -> Iterator[_EventCollector]:
    """Attach an event collector to the shared tracker logger."""

    base = get_logger(BASE_LOGGER_NAME)
    collector = _EventCollector()
    base.addHandler(collector)
    try:
        yield collector
    finally:
        base.removeHandler(collector)


@pytest.fixture()
def tracker() -> Iterator[ErrorTracker]:
    """Yield a tracker with default configuration and destroy it afterwards."""

    t = ErrorTracker(config=TrackerConfig())
    try:
        yield t
    finally:
        t.destroy()
