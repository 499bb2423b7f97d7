"""Severity-keyed notification dispatcher.

Subscribers register a callback for one severity. When a record is dispatched,
every matching subscription is scheduled on a thread pool, so the reporting
call returns before callbacks necessarily run. Each subscription fires at
most once per record; ordering among subscriptions is unspecified.

Failure isolation
-----------------
A callback that raises is caught on the worker thread, logged, counted, and
handed to the ``on_callback_error`` hook. It never reaches the reporter and
never prevents other subscribers from running. Exceptions raised by the hook
itself are logged and dropped.

After :meth:`NotificationDispatcher.shutdown`, subscriptions are released and
no further callbacks fire, including ones already queued.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from threading import RLock
from typing import Callable, Dict, List, Optional, Union

from ..errors import ErrorSeverity, TrackerClosedError
from ..logging import ErrorLogContext, get_logger, log_event
from ..metrics import DispatchCounters
from ..models import StructuredError
from ..safe_text import safe_str
from .subscription import ErrorCallback, Subscription

CallbackErrorHook = Callable[[Subscription, StructuredError, BaseException], None]

_THREAD_PREFIX = "error-tracker-dispatch"


class NotificationDispatcher:
    """Registry of severity subscriptions plus an asynchronous delivery pool.

    Attributes:
        counters: Dispatch counters (scheduled, delivered, failed, in flight).
        on_callback_error: Optional hook invoked when a callback raises.
        logger: Structured logger instance.
    """

    def __init__(
        self,
        max_workers: int = 4,
        on_callback_error: Optional[CallbackErrorHook] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._lock = RLock()
        self._subscriptions: Dict[ErrorSeverity, List[Subscription]] = {}
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=_THREAD_PREFIX)
        self._closed = False
        self.counters = DispatchCounters()
        self.on_callback_error = on_callback_error
        self.logger = logger or get_logger("error_tracker.dispatch")

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------- Registry -------------------------- #
    def subscribe(self, severity: Union[ErrorSeverity, str], callback: ErrorCallback) -> Subscription:
        """Register ``callback`` for records of exactly ``severity``.

        Raises:
            TypeError: If ``callback`` is not callable.
            TrackerClosedError: If the dispatcher has been shut down.
        """
        if not callable(callback):
            raise TypeError("callback must be callable")
        subscription = Subscription(severity=ErrorSeverity.coerce(severity), callback=callback)
        with self._lock:
            if self._closed:
                raise TrackerClosedError("dispatcher has been shut down")
            self._subscriptions.setdefault(subscription.severity, []).append(subscription)
        self.logger.debug(
            "Subscription registered",
            extra={"subscription_id": subscription.subscription_id, "severity": subscription.severity.value},
        )
        return subscription

    def unsubscribe(self, subscription: Union[Subscription, str]) -> bool:
        """Remove a subscription by handle or id; False if it was not registered."""
        sub_id = subscription.subscription_id if isinstance(subscription, Subscription) else subscription
        with self._lock:
            for severity, subs in self._subscriptions.items():
                for idx, sub in enumerate(subs):
                    if sub.subscription_id == sub_id:
                        del subs[idx]
                        if not subs:
                            del self._subscriptions[severity]
                        return True
        return False

    def subscriptions(self, severity: Optional[ErrorSeverity] = None) -> List[Subscription]:
        """Return registered subscriptions, optionally for one severity."""
        with self._lock:
            if severity is not None:
                return list(self._subscriptions.get(severity, ()))
            return [sub for subs in self._subscriptions.values() for sub in subs]

    # -------------------------- Delivery -------------------------- #
    def dispatch(self, error: StructuredError) -> int:
        """Schedule every subscription matching ``error.severity``.

        Returns the number of callbacks scheduled (0 after shutdown).
        """
        with self._lock:
            if self._closed:
                return 0
            targets = list(self._subscriptions.get(error.severity, ()))
            scheduled = 0
            for sub in targets:
                self.counters.record_dispatch()
                try:
                    self._executor.submit(self._deliver, sub, error)
                except RuntimeError:  # executor shutting down
                    self.counters.record_abandoned()
                    continue
                scheduled += 1
        return scheduled

    def _deliver(self, subscription: Subscription, error: StructuredError) -> None:
        if self._closed:
            self.counters.record_abandoned()
            return
        try:
            subscription.callback(error)
        except BaseException as exc:  # SystemExit and KeyboardInterrupt stay on the worker too
            try:
                log_event(
                    self.logger,
                    "dispatch.callback_failed",
                    ErrorLogContext.for_error(error),
                    level=logging.ERROR,
                    subscription_id=subscription.subscription_id,
                    callback_error=f"{type(exc).__name__}: {safe_str(exc)}",
                )
                self._handle_failure(subscription, error, exc)
            finally:
                self.counters.record_failure(type(exc).__name__)
        else:
            self.counters.record_delivered()

    def _handle_failure(self, subscription: Subscription, error: StructuredError, exc: BaseException) -> None:
        hook = self.on_callback_error
        if hook is None:
            return
        try:
            hook(subscription, error, exc)
        except Exception:  # pragma: no cover - hook must not take down the worker
            self.logger.exception(
                "Callback error hook failed",
                extra={"subscription_id": subscription.subscription_id, "error_id": error.id},
            )

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until all scheduled callbacks finished; False on timeout."""
        return self.counters.wait_idle(timeout=timeout)

    # -------------------------- Lifecycle -------------------------- #
    def shutdown(self, wait: bool = True) -> None:
        """Release all subscriptions and stop the worker pool. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            released = sum(len(subs) for subs in self._subscriptions.values())
            self._subscriptions.clear()
        # joining the pool from one of its own workers would deadlock
        on_worker = threading.current_thread().name.startswith(_THREAD_PREFIX)
        self._executor.shutdown(wait=wait and not on_worker)
        self.logger.info("Dispatcher shut down", extra={"released_subscriptions": released})


__all__ = ["NotificationDispatcher", "CallbackErrorHook"]
