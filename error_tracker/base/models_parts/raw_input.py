"""Tagged variant for raw reporting input.

``report`` accepts either a plain message or a failure object. The input is
resolved once, at report time, into one of two shapes:

- :class:`TextInput` for strings (and anything coerced to a string),
- :class:`FaultInput` for exceptions, carrying their description and, when the
  exception was actually raised, its formatted traceback.
"""
from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..safe_text import safe_str

_UNPRINTABLE = "<unprintable error input>"


@dataclass(frozen=True)
class TextInput:
    """Plain-text report input."""

    text: str


@dataclass(frozen=True)
class FaultInput:
    """Exception-derived report input."""

    description: str
    trace: Optional[str] = None
    error: Optional[BaseException] = field(default=None, compare=False, repr=False)


RawInput = Union[TextInput, FaultInput]


def normalize_input(raw: Any) -> RawInput:
    """Resolve arbitrary report input into a :data:`RawInput` variant.

    Never raises: inputs that are neither strings nor exceptions are coerced
    to their string representation.
    """
    if isinstance(raw, (TextInput, FaultInput)):
        return raw
    if isinstance(raw, str):
        return TextInput(raw)
    if isinstance(raw, BaseException):
        description = safe_str(raw, _UNPRINTABLE) or type(raw).__name__
        trace: Optional[str] = None
        if raw.__traceback__ is not None:
            try:
                trace = "".join(traceback.format_exception(type(raw), raw, raw.__traceback__))
            except Exception:  # pragma: no cover - formatting of exotic exceptions
                trace = None
        return FaultInput(description=description, trace=trace, error=raw)
    return TextInput(safe_str(raw, _UNPRINTABLE))


__all__ = ["TextInput", "FaultInput", "RawInput", "normalize_input"]
