"""Text-based report formats: markdown, plain text, delimited rows and JSON."""

import csv
import io
import json
from collections.abc import Sequence
from datetime import datetime

from verifyforge.models.result import TestResult
from verifyforge.reporting.base import (
    ExportedReport,
    dump_result,
    flatten,
    generated_line,
    summary_rows,
)
from verifyforge.reporting.config import ReportConfig

REPORT_VERSION = "2.0"


def export_markdown(
    result: TestResult, config: ReportConfig, now: datetime
) -> ExportedReport:
    """Headed markdown with the result dumped in a fenced JSON block."""
    lines = [f"# {config.title}", ""]
    if config.attribution:
        lines += [f"*{config.attribution}*", ""]
    lines += ["## Test Summary", ""]
    lines += [f"- **{label}**: {value}" for label, value in summary_rows(result)]
    lines += ["", "## Detailed Results", "", "```json", dump_result(result), "```"]
    lines += ["", "---", f"*{generated_line(now)}*", ""]

    return ExportedReport(
        content="\n".join(lines).encode(),
        media_type="text/markdown",
        extension="md",
    )


def export_text(
    result: TestResult, config: ReportConfig, now: datetime
) -> ExportedReport:
    """Plain headed sections."""
    lines = [config.title, "=" * len(config.title), ""]
    if config.attribution:
        lines += [config.attribution, ""]
    lines += ["TEST SUMMARY", "-" * len("TEST SUMMARY")]
    lines += [f"{label}: {value}" for label, value in summary_rows(result)]
    lines += ["", "DETAILED RESULTS", "-" * len("DETAILED RESULTS"), dump_result(result)]
    lines += ["", "---", generated_line(now), ""]

    return ExportedReport(
        content="\n".join(lines).encode(),
        media_type="text/plain",
        extension="txt",
    )


def export_csv(
    result: TestResult, config: ReportConfig, now: datetime
) -> ExportedReport:
    """Comma-delimited rows."""
    return ExportedReport(
        content=_delimited(result, config, now, dialect="excel").encode(),
        media_type="text/csv",
        extension="csv",
    )


def export_excel(
    result: TestResult, config: ReportConfig, now: datetime
) -> ExportedReport:
    """Tab-delimited rows with a byte order mark, as Excel expects."""
    return ExportedReport(
        content=_delimited(result, config, now, dialect="excel-tab").encode(
            "utf-8-sig"
        ),
        media_type="application/vnd.ms-excel",
        extension="xls",
    )


def export_json(
    result: TestResult, config: ReportConfig, now: datetime
) -> ExportedReport:
    """JSON envelope of report metadata and the unmodified result."""
    report = {
        "meta": {
            "title": config.title,
            "companyName": config.company_name,
            "generated": now.isoformat(),
            "version": REPORT_VERSION,
        },
        "results": result.to_wire(),
    }
    return ExportedReport(
        content=json.dumps(report, indent=2, ensure_ascii=False).encode(),
        media_type="application/json",
        extension="json",
    )


def _delimited(
    result: TestResult, config: ReportConfig, now: datetime, *, dialect: str
) -> str:
    rows: list[Sequence[str]] = [["Report", config.title]]
    if config.attribution:
        rows.append(["Attribution", config.attribution])
    rows += [[], ["Metric", "Value"], *summary_rows(result)]
    rows += [[], ["Field", "Value"], *flatten(result.to_wire())]
    rows += [[], ["Generated", now.isoformat()]]

    buffer = io.StringIO()
    csv.writer(buffer, dialect=dialect).writerows(rows)
    return buffer.getvalue()
