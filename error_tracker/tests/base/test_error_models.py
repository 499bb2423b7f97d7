"""Tests for StructuredError, ErrorContext and raw input normalization."""

from __future__ import annotations

import json
import re
from dataclasses import FrozenInstanceError
from datetime import timezone

import pytest

from error_tracker.base.errors import ErrorCategory, ErrorSeverity
from error_tracker.base.models import (
    ErrorContext,
    FaultInput,
    StructuredError,
    TextInput,
    format_timestamp,
    generate_error_id,
    normalize_input,
)


def test_generated_ids_follow_format_and_never_repeat():
    ids = [generate_error_id() for _ in range(1000)]
    assert len(set(ids)) == 1000
    assert all(re.fullmatch(r"err_\d+_[0-9a-f]{9}_\d+", i) for i in ids)


def test_create_from_text():
    err = StructuredError.create("disk almost full", ErrorCategory.RESOURCE, ErrorSeverity.HIGH)
    assert err.message == "disk almost full"
    assert err.timestamp.tzinfo is timezone.utc
    assert err.context == ErrorContext()
    assert err.original_error is None


def test_record_is_frozen_except_through_mark_resolved():
    err = StructuredError.create("x", ErrorCategory.UNKNOWN, ErrorSeverity.LOW)
    with pytest.raises(FrozenInstanceError):
        err.message = "changed"  # type: ignore[misc]
    assert err.mark_resolved("first") is True
    assert err.mark_resolved("second") is False
    assert (err.resolved, err.resolution) == (True, "first")


def test_to_dict_is_json_serializable():
    try:
        raise ValueError("bad payload")
    except ValueError as exc:
        err = StructuredError.create(exc, ErrorCategory.PARSING, ErrorSeverity.LOW, {"guildId": "g", "operation": "parse"})
    data = err.to_dict()
    json.dumps(data)
    assert data["category"] == "parsing"
    assert data["severity"] == "low"
    assert data["timestamp"].endswith("Z")
    assert data["context"] == {"guild_id": "g", "operation": "parse", "metadata": {}}
    assert data["original_error"] == {"type": "ValueError", "message": "bad payload"}
    assert "ValueError: bad payload" in data["stack_trace"]


def test_format_timestamp_treats_naive_as_utc():
    from datetime import datetime

    assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000000Z"


def test_context_from_mapping_aliases_and_unknown_keys():
    ctx = ErrorContext.from_value(
        {"userId": 7, "guild_id": "g", "messageId": None, "retry": 2, "metadata": {"a": [1, 2]}}
    )
    assert ctx.user_id == "7"
    assert ctx.guild_id == "g"
    assert ctx.message_id is None
    assert ctx.metadata == {"retry": 2, "a": "[1, 2]"}


def test_context_merge_prefers_overrides_and_keeps_base_values():
    base = ErrorContext(user_id="u", operation="op", metadata={"x": 1, "y": 1})
    merged = base.merged({"operation": "other", "metadata": {"y": 2}}, metadata={"z": True}, component="db")
    assert merged.user_id == "u"
    assert merged.operation == "other"
    assert merged.component == "db"
    assert merged.metadata == {"x": 1, "y": 2, "z": True}
    # original untouched
    assert base.operation == "op"
    assert base.metadata == {"x": 1, "y": 1}


def test_context_merge_rejects_unknown_named_field():
    with pytest.raises(TypeError):
        ErrorContext().merged(shard="1")


def test_normalize_input_variants():
    assert normalize_input("text") == TextInput("text")
    assert normalize_input(404) == TextInput("404")

    fault = normalize_input(OSError())
    assert isinstance(fault, FaultInput)
    assert fault.description == "OSError"
    assert fault.trace is None

    try:
        raise KeyError("k")
    except KeyError as exc:
        raised = normalize_input(exc)
    assert raised.trace is not None and "KeyError" in raised.trace


def test_records_hash_by_id_and_work_in_sets():
    err = StructuredError.create("x", ErrorCategory.NETWORK, ErrorSeverity.LOW, {"metadata": {"k": 1}})
    before = hash(err)
    assert err.mark_resolved("fixed") is True
    assert hash(err) == before == hash(err.id)
    other = StructuredError.create("x", ErrorCategory.NETWORK, ErrorSeverity.LOW)
    assert {err, other, err} == {err, other}
    assert {err.id: err}[err.id] is err
