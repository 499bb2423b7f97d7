"""Error export package (JSON / CSV)."""

from .exporter import ExportFormat, CSV_HEADER, export_json, export_csv, export_records

__all__ = ["ExportFormat", "CSV_HEADER", "export_json", "export_csv", "export_records"]
