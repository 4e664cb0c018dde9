"""Business logic services package with public service helpers."""

from .chart_service import CHART_NAMES, ChartService, UnknownChartError
from .export_service import EXPORT_FORMATS, ExportService, UnsupportedFormatError, report_filename

__all__ = [
    "CHART_NAMES",
    "ChartService",
    "UnknownChartError",
    "EXPORT_FORMATS",
    "ExportService",
    "UnsupportedFormatError",
    "report_filename",
]
