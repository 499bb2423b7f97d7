"""Tracked error data model public surface.

Re-exports the one-class-per-file implementations under
``error_tracker.base.models_parts`` behind a stable import path.
"""

from .models_parts import (
    ErrorContext,
    MetadataValue,
    TextInput,
    FaultInput,
    RawInput,
    normalize_input,
    StructuredError,
    generate_error_id,
    format_timestamp,
    ErrorStatsSummary,
)

__all__ = [
    "ErrorContext",
    "MetadataValue",
    "TextInput",
    "FaultInput",
    "RawInput",
    "normalize_input",
    "StructuredError",
    "generate_error_id",
    "format_timestamp",
    "ErrorStatsSummary",
]
