"""Dispatch of a result to the encoder for a report format."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime

from verifyforge.models.result import TestResult
from verifyforge.reporting.base import Exporter, ExportedReport, ReportFormat
from verifyforge.reporting.config import ReportConfig
from verifyforge.reporting.documents import export_pdf, export_word
from verifyforge.reporting.html import export_html
from verifyforge.reporting.plain import (
    export_csv,
    export_excel,
    export_json,
    export_markdown,
    export_text,
)

log = logging.getLogger(__name__)

EXPORTERS: Mapping[ReportFormat, Exporter] = {
    ReportFormat.PDF: export_pdf,
    ReportFormat.WORD: export_word,
    ReportFormat.MARKDOWN: export_markdown,
    ReportFormat.EXCEL: export_excel,
    ReportFormat.CSV: export_csv,
    ReportFormat.JSON: export_json,
    ReportFormat.HTML: export_html,
    ReportFormat.TEXT: export_text,
}


class UnsupportedFormatError(Exception):
    """Raised when a report is requested in a format that is not supported."""


def parse_format(value: object) -> ReportFormat:
    """Convert a format name into a ReportFormat.

    Raises:
        UnsupportedFormatError: If the value is not the name of a supported
            format

    """
    supported = ", ".join(f.value for f in ReportFormat)
    error = UnsupportedFormatError(
        f"Unsupported format: {value}. Supported formats: {supported}"
    )
    if not isinstance(value, str):
        raise error
    try:
        return ReportFormat(value.strip().lower())
    except ValueError:
        raise error from None


def export(
    result: TestResult,
    report_format: ReportFormat | str,
    config: ReportConfig | None = None,
    now: datetime | None = None,
) -> ExportedReport:
    """Render a result in the given format.

    Args:
        result: Canonical result to render
        report_format: Target format, as enum member or name
        config: Branding options (defaults apply when omitted)
        now: Timestamp embedded in the report (default: current UTC time)

    Returns:
        The rendered document with its media type and file extension

    Raises:
        UnsupportedFormatError: If the format is not supported

    """
    fmt = parse_format(report_format)
    report = EXPORTERS[fmt](
        result,
        config or ReportConfig(),
        now or datetime.now(UTC),
    )
    log.info("Exported %s report (%d bytes)", fmt, len(report.content))
    return report
