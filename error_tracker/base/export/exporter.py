"""Serialize stored errors to JSON or CSV text.

The CSV layout is a stable contract consumed by spreadsheets and the
dashboard: header ``id,timestamp,message,category,severity,resolved``, one
row per record in insertion order, ``\\n`` line endings, and minimal quoting
(messages containing commas, quotes or newlines are quoted per RFC 4180).
"""
from __future__ import annotations

import csv
import io
import json
from typing import Iterable, List, Literal

from ..models import StructuredError, format_timestamp

ExportFormat = Literal["json", "csv"]

CSV_HEADER: List[str] = ["id", "timestamp", "message", "category", "severity", "resolved"]


def export_json(errors: Iterable[StructuredError]) -> str:
    """Return an indented JSON array with every field of each record."""
    return json.dumps([e.to_dict() for e in errors], indent=2, ensure_ascii=False)


def export_csv(errors: Iterable[StructuredError]) -> str:
    """Return CSV text: the fixed header followed by one row per record."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for e in errors:
        writer.writerow(
            [
                e.id,
                format_timestamp(e.timestamp),
                e.message,
                e.category.value,
                e.severity.value,
                "true" if e.resolved else "false",
            ]
        )
    # no trailing newline: N records produce exactly N+1 lines
    return buf.getvalue().rstrip("\n")


def export_records(errors: Iterable[StructuredError], fmt: ExportFormat | str = "json") -> str:
    """Serialize ``errors`` in ``fmt`` (``"json"`` or ``"csv"``).

    Raises:
        ValueError: If ``fmt`` is not a supported format.
    """
    normalized = str(fmt).strip().lower()
    if normalized == "json":
        return export_json(errors)
    if normalized == "csv":
        return export_csv(errors)
    raise ValueError(f"unsupported export format: {fmt!r} (expected 'json' or 'csv')")


__all__ = ["ExportFormat", "CSV_HEADER", "export_json", "export_csv", "export_records"]
