"""Auxiliary logging helpers (formatters, context) used by base.logging."""

from .json_formatter import JsonFormatter, ISO
from .logging_context import ErrorLogContext

__all__ = ["JsonFormatter", "ISO", "ErrorLogContext"]
