"""Lifecycle behavior: notifications, retention, hooks, teardown, logging."""
from __future__ import annotations

import logging
import sys
import threading
import time

import pytest

from error_tracker import (
    ErrorCategory,
    ErrorSeverity,
    ErrorTracker,
    TrackerClosedError,
    TrackerConfig,
)


def test_failing_callback_is_rereported_without_recursion(tracker):
    def broken(_error):
        raise RuntimeError("subscriber blew up")

    also_low = []
    tracker.subscribe(ErrorSeverity.HIGH, broken)
    tracker.subscribe(ErrorSeverity.LOW, also_low.append)

    original = tracker.report("primary", ErrorCategory.DATABASE, ErrorSeverity.HIGH)
    assert tracker.wait_for_notifications(timeout=2.0)

    follow_ups = tracker.query(severity=ErrorSeverity.LOW)
    assert len(follow_ups) == 1
    follow_up = follow_ups[0]
    assert follow_up.category is ErrorCategory.VALIDATION
    assert follow_up.message == "subscriber blew up"
    assert follow_up.context.component == "notification_dispatcher"
    assert follow_up.context.operation == "subscriber_callback"
    assert follow_up.context.metadata["originalErrorId"] == original.id
    # re-reports are not dispatched, so the LOW subscriber never saw it
    assert also_low == []

    snap = tracker.dispatcher.counters.snapshot()
    assert snap.failed == 1
    assert snap.failure_by_type == {"RuntimeError": 1}


def test_callback_raising_system_exit_is_rereported(tracker):
    def quits(_error):
        raise SystemExit(3)

    tracker.subscribe(ErrorSeverity.HIGH, quits)
    original = tracker.report("primary", ErrorCategory.NETWORK, ErrorSeverity.HIGH)
    assert tracker.wait_for_notifications(timeout=2.0)

    follow_up = tracker.query(severity=ErrorSeverity.LOW)[0]
    assert follow_up.category is ErrorCategory.VALIDATION
    assert isinstance(follow_up.original_error, SystemExit)
    assert follow_up.context.metadata["originalErrorId"] == original.id
    assert tracker.dispatcher.counters.snapshot().in_flight == 0


def test_unsubscribe_stops_delivery(tracker):
    seen = []
    sub = tracker.subscribe(ErrorSeverity.CRITICAL, seen.append)
    assert tracker.unsubscribe(sub) is True
    assert tracker.unsubscribe(sub.subscription_id) is False
    tracker.report("x", severity=ErrorSeverity.CRITICAL)
    assert tracker.wait_for_notifications(timeout=2.0)
    assert seen == []


def test_notify_false_skips_dispatch(tracker):
    seen = []
    tracker.subscribe(ErrorSeverity.MEDIUM, seen.append)
    tracker.report("quiet", notify=False)
    assert tracker.wait_for_notifications(timeout=2.0)
    assert seen == []


def test_max_history_evicts_oldest(events):
    t = ErrorTracker(config=TrackerConfig(max_history=3))
    try:
        records = [t.report(f"r{i}") for i in range(5)]
        assert len(t.store) == 3
        assert [r.id for r in t.query()] == [r.id for r in records[2:]]
        assert t.get(records[0].id) is None
        trimmed = events.named("errors.trimmed")
        assert len(trimmed) == 2
        assert trimmed[0]["evicted"] == 1
        assert trimmed[0]["_levelno"] == logging.WARNING
    finally:
        t.destroy()


def test_auto_resolve_low_errors():
    t = ErrorTracker(config=TrackerConfig(auto_resolve_low_after_seconds=0.05))
    try:
        low = t.report("minor", severity=ErrorSeverity.LOW)
        high = t.report("major", severity=ErrorSeverity.HIGH)
        deadline = time.monotonic() + 2.0
        while not t.get(low.id).resolved and time.monotonic() < deadline:
            time.sleep(0.01)
        assert t.get(low.id).resolution == "Auto-resolved"
        assert t.get(high.id).resolved is False
    finally:
        t.destroy()


def test_destroy_cancels_pending_auto_resolve():
    t = ErrorTracker(config=TrackerConfig(auto_resolve_low_after_seconds=30))
    low = t.report("minor", severity=ErrorSeverity.LOW)
    assert low.id in t._timers
    t.destroy()
    assert t._timers == {}


def test_destroy_is_idempotent_and_final(events):
    t = ErrorTracker(config=TrackerConfig())
    seen = []
    t.subscribe(ErrorSeverity.HIGH, seen.append)
    t.report("before")
    t.destroy()
    t.destroy()

    assert t.closed
    assert len(t.store) == 0
    assert t.dispatcher.closed
    assert t.dispatcher.subscriptions() == []
    assert len(events.named("tracker.destroyed")) == 1

    after = t.report("after", severity=ErrorSeverity.HIGH)
    assert after.id.startswith("err_")
    assert t.get(after.id) is None
    assert seen == []
    with pytest.raises(TrackerClosedError):
        t.subscribe(ErrorSeverity.HIGH, seen.append)


def test_context_manager_destroys():
    with ErrorTracker(config=TrackerConfig()) as t:
        t.report("inside")
        assert len(t.store) == 1
    assert t.closed
    assert len(t.store) == 0


def test_reported_errors_logged_at_mapped_level(tracker, events):
    tracker.report("c", severity=ErrorSeverity.CRITICAL)
    tracker.report("m", severity=ErrorSeverity.MEDIUM, context={"component": "bot"})
    tracker.report("l", severity=ErrorSeverity.LOW)
    reported = events.named("error.reported")
    assert [e["_levelno"] for e in reported] == [logging.ERROR, logging.WARNING, logging.INFO]
    assert reported[1]["severity"] == "medium"
    assert reported[1]["component"] == "bot"
    assert reported[1]["message"] == "m"
    assert "operation" not in reported[1]


def test_resolve_and_clear_emit_events(tracker, events):
    err = tracker.report("x")
    tracker.resolve(err.id, "done")
    tracker.clear()
    resolved = events.named("error.resolved")
    assert resolved and resolved[0]["error_id"] == err.id
    assert resolved[0]["resolution"] == "done"
    cleared = events.named("errors.cleared")
    assert cleared and cleared[0]["removed"] == 1


def test_concurrent_reports_keep_every_record(tracker):
    per_thread = 50
    barrier = threading.Barrier(8)
    ids = []
    lock = threading.Lock()

    def worker(n):
        barrier.wait()
        mine = [tracker.report(f"t{n}-{i}").id for i in range(per_thread)]
        with lock:
            ids.extend(mine)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert len(ids) == 8 * per_thread
    assert len(set(ids)) == len(ids)
    assert len(tracker.store) == len(ids)


def test_global_handlers_capture_uncaught_exceptions(tracker, monkeypatch):
    chained = []
    monkeypatch.setattr(sys, "excepthook", lambda *a: chained.append(a))
    monkeypatch.setattr(threading, "excepthook", lambda args: chained.append(args))

    tracker.install_global_handlers()
    tracker.install_global_handlers()
    try:
        raise LookupError("nobody caught me")
    except LookupError:
        sys.excepthook(*sys.exc_info())

    def crash():
        raise ArithmeticError("thread died")

    th = threading.Thread(target=crash, name="crasher")
    th.start()
    th.join()

    critical = tracker.query(severity=ErrorSeverity.CRITICAL)
    assert len(critical) == 1
    assert critical[0].message == "nobody caught me"
    assert critical[0].context.operation == "uncaught_exception"
    assert critical[0].context.component == "process"
    assert critical[0].stack_trace is not None

    high = tracker.query(severity=ErrorSeverity.HIGH)
    assert len(high) == 1
    assert high[0].context.operation == "uncaught_thread_exception"
    assert high[0].context.metadata["threadName"] == "crasher"
    assert len(chained) == 2

    tracker.uninstall_global_handlers()
    assert sys.excepthook != tracker._handle_uncaught
    sys.excepthook(LookupError, LookupError("later"), None)
    assert len(tracker.query(severity=ErrorSeverity.CRITICAL)) == 1
    assert len(chained) == 3
