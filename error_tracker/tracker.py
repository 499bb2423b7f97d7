"""ErrorTracker facade.

Ties the base layer together into the object services hold on to:

- ``report`` and the ``report_*`` classifier helpers normalize raw failures
  into :class:`StructuredError` records, store them, log them and schedule
  subscriber notifications;
- ``get``/``query``/``resolve``/``stats``/``clear``/``export`` read and
  maintain the in-memory history;
- ``install_global_handlers`` optionally routes uncaught process and thread
  exceptions into the tracker;
- ``destroy`` tears everything down (timers, hooks, dispatcher, store).

There is no module-level singleton: construct one tracker per service and pass
it where it is needed.

Usage::

    tracker = ErrorTracker()
    tracker.subscribe(ErrorSeverity.HIGH, alert_on_call)
    try:
        db.execute(sql)
    except sqlite3.Error as exc:
        tracker.report_database_error(exc, "INSERT", {"guildId": guild.id})
"""
from __future__ import annotations

import logging
import sys
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .base import (
    ClearCriteria,
    ErrorCategory,
    ErrorContext,
    ErrorQuery,
    ErrorSeverity,
    ErrorStatsSummary,
    ErrorStore,
    NotificationDispatcher,
    StructuredError,
    Subscription,
    TrackerClosedError,
    classify_exception,
    compute_stats,
    default_severity_for,
    export_records,
)
from .base.errors_parts.classification import (
    DATABASE_SEVERITY,
    NETWORK_SEVERITY,
    PERMISSION_SEVERITY,
    RATE_LIMIT_SEVERITY,
    TIMEOUT_SEVERITY,
    VALIDATION_SEVERITY,
)
from .base.logging import ErrorLogContext, get_logger, log_event
from .base.safe_text import safe_repr
from .base.notifications.subscription import ErrorCallback
from .config import TrackerConfig, get_tracker_config
from .config.defaults import AUTO_RESOLVE_RESOLUTION_TEXT, DEFAULT_STATS_WINDOW

ContextInput = Union[ErrorContext, Mapping[str, Any], None]

_SEVERITY_LOG_LEVELS: Dict[ErrorSeverity, int] = {
    ErrorSeverity.CRITICAL: logging.ERROR,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.LOW: logging.INFO,
}


def _coerce_context(context: Any) -> ErrorContext:
    """Best-effort conversion of caller context; malformed input becomes empty."""
    try:
        return ErrorContext.from_value(context)
    except Exception:
        return ErrorContext(metadata={"invalidContext": safe_repr(context)})


class ErrorTracker:
    """Structured error tracking facade.

    Attributes:
        logger: Structured logger used for tracker events.
    """

    def __init__(self, config: Optional[TrackerConfig] = None, logger: Optional[logging.Logger] = None) -> None:
        self._config = config or get_tracker_config()
        self.logger = logger or get_logger("error_tracker.tracker", json_mode=self._config.log_json)
        self._store = ErrorStore()
        self._dispatcher = NotificationDispatcher(
            max_workers=self._config.dispatch_workers,
            on_callback_error=self._on_callback_error,
            logger=get_logger("error_tracker.dispatch", json_mode=self._config.log_json),
        )
        self._lifecycle_lock = threading.Lock()
        self._destroyed = False
        self._timers: Dict[str, threading.Timer] = {}
        self._timers_lock = threading.Lock()
        self._prev_excepthook: Optional[Callable[..., Any]] = None
        self._prev_thread_excepthook: Optional[Callable[..., Any]] = None
        self._installed_excepthook: Optional[Callable[..., Any]] = None
        self._installed_thread_excepthook: Optional[Callable[..., Any]] = None

    # -------------------------- Properties -------------------------- #
    @property
    def store(self) -> ErrorStore:
        return self._store

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return self._dispatcher

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._destroyed

    # -------------------------- Reporting -------------------------- #
    def report(
        self,
        raw: Any,
        category: Union[ErrorCategory, str] = ErrorCategory.UNKNOWN,
        severity: Union[ErrorSeverity, str] = ErrorSeverity.MEDIUM,
        context: ContextInput = None,
        *,
        notify: bool = True,
    ) -> StructuredError:
        """Normalize, store, log and dispatch a failure.

        ``raw`` may be an exception, a message string, or any other object
        (stringified). Category and severity accept enum members or their
        names/values; unknown strings fall back to ``UNKNOWN``/``MEDIUM``.

        Never raises. After :meth:`destroy` the record is still built and
        returned but neither stored nor dispatched.
        """
        record = StructuredError.create(
            raw,
            ErrorCategory.coerce(category),
            ErrorSeverity.coerce(severity),
            _coerce_context(context),
        )
        if self._destroyed:
            return record
        try:
            self._store.add(record)
            self._enforce_history()
            self._log_reported(record)
            if notify:
                self._dispatcher.dispatch(record)
            self._schedule_auto_resolve(record)
        except Exception:
            self.logger.exception("Failed to record error", extra={"error_id": record.id})
        return record

    def report_database_error(
        self,
        error: Any,
        operation: str,
        context: ContextInput = None,
    ) -> StructuredError:
        """Report a database failure (DATABASE, HIGH)."""
        ctx = _coerce_context(context).merged(operation=operation, component="database")
        return self.report(error, ErrorCategory.DATABASE, DATABASE_SEVERITY, ctx)

    def report_network_error(
        self,
        error: Any,
        endpoint: Optional[str] = None,
        context: ContextInput = None,
    ) -> StructuredError:
        """Report a network failure (NETWORK, MEDIUM) with the endpoint in metadata."""
        ctx = _coerce_context(context).merged(
            metadata={"endpoint": endpoint},
            operation="network_request",
            component="network",
        )
        return self.report(error, ErrorCategory.NETWORK, NETWORK_SEVERITY, ctx)

    def report_validation_error(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        context: ContextInput = None,
    ) -> StructuredError:
        """Report invalid input (VALIDATION, LOW) with the offending field/value."""
        ctx = _coerce_context(context).merged(
            metadata={"field": field, "value": value},
            operation="validation",
        )
        return self.report(message, ErrorCategory.VALIDATION, VALIDATION_SEVERITY, ctx)

    def report_rate_limit_error(
        self,
        user_id: str,
        reason: str,
        context: ContextInput = None,
    ) -> StructuredError:
        """Report a throttled request (RATE_LIMIT, MEDIUM)."""
        ctx = _coerce_context(context).merged(
            user_id=user_id,
            operation="rate_limit_check",
            component="rate_limiter",
        )
        return self.report(f"Rate limit exceeded: {reason}", ErrorCategory.RATE_LIMIT, RATE_LIMIT_SEVERITY, ctx)

    def report_timeout_error(
        self,
        operation: str,
        timeout_ms: Union[int, float],
        context: ContextInput = None,
    ) -> StructuredError:
        """Report an operation that exceeded its deadline (TIMEOUT, HIGH)."""
        ctx = _coerce_context(context).merged(metadata={"timeoutMs": timeout_ms}, operation=operation)
        return self.report(
            f"Operation timed out after {timeout_ms}ms",
            ErrorCategory.TIMEOUT,
            TIMEOUT_SEVERITY,
            ctx,
        )

    def report_permission_error(
        self,
        action: str,
        user_id: Optional[str] = None,
        context: ContextInput = None,
    ) -> StructuredError:
        """Report a denied action (PERMISSION, MEDIUM).

        ``user_id`` only overrides the caller context when given.
        """
        ctx = _coerce_context(context).merged(
            metadata={"action": action},
            user_id=user_id,
            operation="permission_check",
        )
        return self.report(
            f"Permission denied for action: {action}",
            ErrorCategory.PERMISSION,
            PERMISSION_SEVERITY,
            ctx,
        )

    def report_exception(
        self,
        exc: BaseException,
        context: ContextInput = None,
        severity: Union[ErrorSeverity, str, None] = None,
    ) -> StructuredError:
        """Report an exception, deriving category (and severity) from it."""
        category = ErrorCategory.UNKNOWN
        if isinstance(exc, BaseException):
            try:
                category = classify_exception(exc)
            except Exception:  # attribute access on exotic exceptions
                category = ErrorCategory.UNKNOWN
        sev = ErrorSeverity.coerce(severity) if severity is not None else default_severity_for(category)
        return self.report(exc, category, sev, context)

    # -------------------------- Reads -------------------------- #
    def get(self, error_id: str) -> Optional[StructuredError]:
        """Return the stored record for ``error_id`` or ``None``."""
        return self._store.get(error_id)

    def query(self, criteria: "ErrorQuery | Mapping[str, Any] | None" = None, **filters: Any) -> List[StructuredError]:
        """Return stored records matching every supplied filter, oldest first.

        Raises:
            pydantic.ValidationError: On malformed filters (e.g. ``limit=0``).
        """
        return self._store.query(criteria, **filters)

    def stats(self, window: str = DEFAULT_STATS_WINDOW) -> ErrorStatsSummary:
        """Aggregate stored records over a rolling ``window``.

        Raises:
            ValueError: If ``window`` is not ``hour``, ``day``, ``week`` or ``all``.
        """
        return compute_stats(self._store.values(), window)

    def export(self, fmt: str = "json") -> str:
        """Serialize all stored records as ``json`` or ``csv``.

        Raises:
            ValueError: On an unsupported format.
        """
        return export_records(self._store.values(), fmt)

    # -------------------------- Maintenance -------------------------- #
    def resolve(self, error_id: str, resolution: str) -> bool:
        """Mark a stored, unresolved error as resolved. Never raises."""
        if not self._store.resolve(error_id, resolution):
            return False
        log_event(
            self.logger,
            "error.resolved",
            ErrorLogContext.for_error(self._store.get(error_id)),
            resolution=resolution,
        )
        return True

    def clear(self, criteria: "ClearCriteria | Mapping[str, Any] | None" = None, **filters: Any) -> int:
        """Remove records matching all supplied criteria; return the count."""
        removed = self._store.clear(criteria, **filters)
        log_event(self.logger, "errors.cleared", removed=removed, remaining=len(self._store))
        return removed

    def _enforce_history(self) -> None:
        evicted = self._store.trim(self._config.max_history)
        if not evicted:
            return
        with self._timers_lock:
            for error in evicted:
                timer = self._timers.pop(error.id, None)
                if timer is not None:
                    timer.cancel()
        log_event(
            self.logger,
            "errors.trimmed",
            level=logging.WARNING,
            evicted=len(evicted),
            max_history=self._config.max_history,
        )

    def _log_reported(self, error: StructuredError) -> None:
        log_event(
            self.logger,
            "error.reported",
            ErrorLogContext.for_error(
                error,
                component=error.context.component,
                operation=error.context.operation,
            ),
            level=_SEVERITY_LOG_LEVELS.get(error.severity, logging.WARNING),
            message=error.message,
        )

    # -------------------------- Auto-resolution -------------------------- #
    def _schedule_auto_resolve(self, error: StructuredError) -> None:
        delay = self._config.auto_resolve_low_after_seconds
        if delay is None or error.severity is not ErrorSeverity.LOW:
            return
        timer = threading.Timer(delay, self._auto_resolve, args=(error.id,))
        timer.daemon = True
        with self._timers_lock:
            if self._destroyed:
                return
            self._timers[error.id] = timer
        timer.start()

    def _auto_resolve(self, error_id: str) -> None:
        with self._timers_lock:
            self._timers.pop(error_id, None)
        if self._destroyed:
            return
        self.resolve(error_id, AUTO_RESOLVE_RESOLUTION_TEXT)

    # -------------------------- Notifications -------------------------- #
    def subscribe(self, severity: Union[ErrorSeverity, str], callback: ErrorCallback) -> Subscription:
        """Invoke ``callback`` asynchronously for every record of ``severity``.

        Raises:
            TrackerClosedError: After :meth:`destroy`.
        """
        if self._destroyed:
            raise TrackerClosedError("tracker has been destroyed")
        return self._dispatcher.subscribe(severity, callback)

    def unsubscribe(self, subscription: Union[Subscription, str]) -> bool:
        """Remove a subscription; False if it was not registered."""
        return self._dispatcher.unsubscribe(subscription)

    def wait_for_notifications(self, timeout: Optional[float] = None) -> bool:
        """Block until scheduled callbacks finished; False on timeout."""
        return self._dispatcher.wait_idle(timeout=timeout)

    def _on_callback_error(self, subscription: Subscription, error: StructuredError, exc: BaseException) -> None:
        """File a failed subscriber as a LOW VALIDATION record, without notifying.

        ``notify=False`` keeps a failing subscriber from triggering another round.
        """
        self.report(
            exc,
            ErrorCategory.VALIDATION,
            ErrorSeverity.LOW,
            ErrorContext(
                operation="subscriber_callback",
                component="notification_dispatcher",
                metadata={
                    "originalErrorId": error.id,
                    "subscriptionId": subscription.subscription_id,
                },
            ),
            notify=False,
        )

    # -------------------------- Process hooks -------------------------- #
    def install_global_handlers(self) -> None:
        """Route uncaught process and thread exceptions into the tracker.

        Previous hooks are chained, so default printing still happens.
        Calling this twice is a no-op.
        """
        with self._lifecycle_lock:
            if self._destroyed or self._installed_excepthook is not None:
                return
            self._prev_excepthook = sys.excepthook
            self._prev_thread_excepthook = threading.excepthook
            self._installed_excepthook = self._handle_uncaught
            self._installed_thread_excepthook = self._handle_thread_exception
            sys.excepthook = self._installed_excepthook
            threading.excepthook = self._installed_thread_excepthook
        self.logger.debug("Global exception handlers installed")

    def uninstall_global_handlers(self) -> None:
        """Restore the hooks that were active before installation."""
        with self._lifecycle_lock:
            if self._installed_excepthook is None:
                return
            # only restore hooks nobody has replaced since
            if sys.excepthook == self._installed_excepthook:
                sys.excepthook = self._prev_excepthook or sys.__excepthook__
            if threading.excepthook == self._installed_thread_excepthook:
                threading.excepthook = self._prev_thread_excepthook or threading.__excepthook__
            self._installed_excepthook = None
            self._installed_thread_excepthook = None
            self._prev_excepthook = None
            self._prev_thread_excepthook = None
        self.logger.debug("Global exception handlers removed")

    def _handle_uncaught(self, exc_type: Any, exc: Any, tb: Any) -> None:
        previous = self._prev_excepthook or sys.__excepthook__
        if not issubclass(exc_type, KeyboardInterrupt):
            if exc is not None and exc.__traceback__ is None and tb is not None:
                exc = exc.with_traceback(tb)
            self.report(
                exc if exc is not None else exc_type.__name__,
                ErrorCategory.UNKNOWN,
                ErrorSeverity.CRITICAL,
                ErrorContext(component="process", operation="uncaught_exception"),
            )
        previous(exc_type, exc, tb)

    def _handle_thread_exception(self, args: Any) -> None:
        previous = self._prev_thread_excepthook or threading.__excepthook__
        if not issubclass(args.exc_type, SystemExit):
            thread = args.thread
            self.report(
                args.exc_value if args.exc_value is not None else args.exc_type.__name__,
                ErrorCategory.UNKNOWN,
                ErrorSeverity.HIGH,
                ErrorContext(
                    component="process",
                    operation="uncaught_thread_exception",
                    metadata={"threadName": thread.name if thread is not None else None},
                ),
            )
        previous(args)

    # -------------------------- Lifecycle -------------------------- #
    def destroy(self) -> None:
        """Tear down timers, hooks, subscriptions and history. Idempotent."""
        with self._lifecycle_lock:
            if self._destroyed:
                return
            self._destroyed = True
        with self._timers_lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        self.uninstall_global_handlers()
        self._dispatcher.shutdown(wait=True)
        removed = self._store.reset()
        log_event(self.logger, "tracker.destroyed", cancelled_timers=len(timers), removed=removed)

    def close(self) -> None:
        self.destroy()

    def __enter__(self) -> "ErrorTracker":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.destroy()


__all__ = ["ErrorTracker", "ContextInput"]
