"""Never-raising text conversion for caller-supplied values.

Report paths stringify arbitrary objects (raw inputs, context fields,
metadata values, exception messages). A value whose ``__str__`` or
``__repr__`` raises must not turn a report into a failure, so these helpers
fall back from ``str`` to ``repr`` to a fixed placeholder.
"""
from __future__ import annotations

from typing import Any

UNPRINTABLE = "<unprintable value>"


def safe_repr(value: Any, placeholder: str = UNPRINTABLE) -> str:
    """Return ``repr(value)``, or ``placeholder`` when that raises."""
    try:
        return repr(value)
    except Exception:
        return placeholder


def safe_str(value: Any, placeholder: str = UNPRINTABLE) -> str:
    """Return ``str(value)``, falling back to :func:`safe_repr`."""
    try:
        return str(value)
    except Exception:
        return safe_repr(value, placeholder)


__all__ = ["UNPRINTABLE", "safe_repr", "safe_str"]
