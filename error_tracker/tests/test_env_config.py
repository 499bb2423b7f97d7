from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from error_tracker.config import TrackerConfig, get_tracker_config, reset_config_cache
from error_tracker.config.defaults import DEFAULT_DISPATCH_WORKERS, DEFAULT_MAX_HISTORY
from error_tracker.config.env import parse_bool_env, parse_float_env, parse_int_env
from error_tracker.tracker import ErrorTracker


def test_defaults_without_sources():
    cfg = get_tracker_config()
    assert cfg.max_history == DEFAULT_MAX_HISTORY == 1000
    assert cfg.dispatch_workers == DEFAULT_DISPATCH_WORKERS
    assert cfg.auto_resolve_low_after_seconds is None
    assert cfg.log_json is True


def test_env_parsers_never_raise(monkeypatch):
    monkeypatch.setenv("X_INT", " 12 ")
    monkeypatch.setenv("X_BAD", "twelve")
    monkeypatch.setenv("X_FLOAT", "0.5")
    monkeypatch.setenv("X_BOOL", "Off")
    assert parse_int_env("X_INT") == 12
    assert parse_int_env("X_BAD") is None
    assert parse_int_env("X_UNSET") is None
    assert parse_float_env("X_FLOAT") == 0.5
    assert parse_float_env("X_BAD") is None
    assert parse_bool_env("X_BOOL") is False
    assert parse_bool_env("X_BAD") is None


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("ERROR_TRACKER_MAX_HISTORY", "50")
    monkeypatch.setenv("ERROR_TRACKER_DISPATCH_WORKERS", "2")
    monkeypatch.setenv("ERROR_TRACKER_AUTO_RESOLVE_LOW_SECONDS", "5")
    monkeypatch.setenv("ERROR_TRACKER_LOG_JSON", "no")
    cfg = get_tracker_config()
    assert cfg.max_history == 50
    assert cfg.dispatch_workers == 2
    assert cfg.auto_resolve_low_after_seconds == 5.0
    assert cfg.log_json is False


def test_file_then_env_then_overrides(monkeypatch, tmp_path):
    cfg_file = tmp_path / "tracker.json"
    cfg_file.write_text(
        json.dumps({"error_tracker": {"max_history": 10, "dispatch_workers": 3, "unrelated": True}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("ERROR_TRACKER_CONFIG_FILE", str(cfg_file))
    assert get_tracker_config().max_history == 10

    monkeypatch.setenv("ERROR_TRACKER_MAX_HISTORY", "20")
    cfg = get_tracker_config({"dispatch_workers": 1, "auto_resolve_low_after_seconds": None})
    assert cfg.max_history == 20
    assert cfg.dispatch_workers == 1
    assert cfg.auto_resolve_low_after_seconds is None


def test_config_file_is_cached_until_reset(monkeypatch, tmp_path):
    cfg_file = tmp_path / "tracker.json"
    cfg_file.write_text(json.dumps({"max_history": 7}), encoding="utf-8")
    monkeypatch.setenv("ERROR_TRACKER_CONFIG_FILE", str(cfg_file))
    assert get_tracker_config().max_history == 7
    cfg_file.write_text(json.dumps({"max_history": 8}), encoding="utf-8")
    assert get_tracker_config().max_history == 7
    reset_config_cache()
    assert get_tracker_config().max_history == 8


def test_missing_or_garbage_file_falls_back(monkeypatch, tmp_path):
    monkeypatch.setenv("ERROR_TRACKER_CONFIG_FILE", str(tmp_path / "absent.json"))
    assert get_tracker_config().max_history == DEFAULT_MAX_HISTORY
    garbage = tmp_path / "garbage.json"
    garbage.write_text("[1, 2, 3]", encoding="utf-8")
    monkeypatch.setenv("ERROR_TRACKER_CONFIG_FILE", str(garbage))
    assert get_tracker_config().max_history == DEFAULT_MAX_HISTORY


def test_yaml_config_file(monkeypatch, tmp_path):
    pytest.importorskip("yaml")
    cfg_file = tmp_path / "tracker.yaml"
    cfg_file.write_text("error_tracker:\n  max_history: 25\n  auto_resolve_low_after_seconds: 1.5\n", encoding="utf-8")
    monkeypatch.setenv("ERROR_TRACKER_CONFIG_FILE", str(cfg_file))
    cfg = get_tracker_config()
    assert cfg.max_history == 25
    assert cfg.auto_resolve_low_after_seconds == 1.5


@pytest.mark.parametrize(
    "bad",
    [
        {"max_history": 0},
        {"dispatch_workers": 0},
        {"auto_resolve_low_after_seconds": -1},
    ],
)
def test_invalid_values_rejected(bad):
    with pytest.raises(ValidationError):
        TrackerConfig(**bad)


def test_tracker_reads_merged_config_when_none_given(monkeypatch):
    monkeypatch.setenv("ERROR_TRACKER_MAX_HISTORY", "2")
    with ErrorTracker() as t:
        assert t.config.max_history == 2
        for i in range(4):
            t.report(str(i))
        assert len(t.store) == 2


def test_undecodable_or_unreadable_file_falls_back(monkeypatch, tmp_path):
    binary = tmp_path / "tracker.bin"
    binary.write_bytes(b"\xff\xfe\x00\x81bad")
    monkeypatch.setenv("ERROR_TRACKER_CONFIG_FILE", str(binary))
    assert get_tracker_config().max_history == DEFAULT_MAX_HISTORY
    with ErrorTracker() as t:
        assert t.config.max_history == DEFAULT_MAX_HISTORY

    reset_config_cache()
    original_read_text = Path.read_text

    def denied(self, *args, **kwargs):
        if self == binary:
            raise PermissionError("denied")
        return original_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", denied)
    assert get_tracker_config().max_history == DEFAULT_MAX_HISTORY
