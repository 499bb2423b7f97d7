"""Severity-keyed notification dispatch package."""

from .subscription import Subscription, ErrorCallback
from .dispatcher import NotificationDispatcher, CallbackErrorHook

__all__ = ["Subscription", "ErrorCallback", "NotificationDispatcher", "CallbackErrorHook"]
