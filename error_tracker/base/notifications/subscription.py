"""Subscription value object for severity-keyed notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable
from uuid import uuid4

from ..errors import ErrorSeverity
from ..models import StructuredError

ErrorCallback = Callable[[StructuredError], object]


@dataclass(frozen=True)
class Subscription:
    """A registered interest in errors of one severity.

    Attributes:
        severity: Severity that triggers the callback (exact match).
        callback: Invoked with the full record on a dispatcher worker thread.
        subscription_id: Generated handle used for unsubscription.
    """

    severity: ErrorSeverity
    callback: ErrorCallback = field(compare=False)
    subscription_id: str = field(default_factory=lambda: f"sub_{uuid4().hex[:12]}")


__all__ = ["Subscription", "ErrorCallback"]
