"""Export of test results into report documents."""

from verifyforge.reporting.base import ExportedReport, ReportFormat
from verifyforge.reporting.config import ReportConfig
from verifyforge.reporting.exporter import (
    UnsupportedFormatError,
    export,
    parse_format,
)

__all__ = [
    "ExportedReport",
    "ReportConfig",
    "ReportFormat",
    "UnsupportedFormatError",
    "export",
    "parse_format",
]
