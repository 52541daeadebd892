"""Exporters for generated markup and declaration sheets."""

from .markup import MarkupExportConfig, MarkupExporter
from .stylesheet import StylesheetExporter

__all__ = [
    "MarkupExportConfig",
    "MarkupExporter",
    "StylesheetExporter",
]
