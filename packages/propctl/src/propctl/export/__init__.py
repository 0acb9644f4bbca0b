from __future__ import annotations

from .sink import ExportFailed, ExportSink, export_record, file_prefix

__all__ = ["ExportFailed", "ExportSink", "export_record", "file_prefix"]
