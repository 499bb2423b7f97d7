"""One-class-per-file parts for the tracked error data model."""

from .error_context import ErrorContext, MetadataValue, coerce_metadata, coerce_metadata_value
from .raw_input import TextInput, FaultInput, RawInput, normalize_input
from .structured_error import StructuredError, generate_error_id, format_timestamp
from .error_stats_summary import ErrorStatsSummary

__all__ = [
    "ErrorContext",
    "MetadataValue",
    "coerce_metadata",
    "coerce_metadata_value",
    "TextInput",
    "FaultInput",
    "RawInput",
    "normalize_input",
    "StructuredError",
    "generate_error_id",
    "format_timestamp",
    "ErrorStatsSummary",
]
