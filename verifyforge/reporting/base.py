"""Shared types and projections used by every report format."""

import json
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from verifyforge.models.result import TestResult
from verifyforge.reporting.config import ReportConfig


class ReportFormat(StrEnum):
    """Closed set of supported export formats."""

    PDF = "pdf"
    WORD = "word"
    MARKDOWN = "markdown"
    EXCEL = "excel"
    CSV = "csv"
    JSON = "json"
    HTML = "html"
    TEXT = "text"


@dataclass(frozen=True, kw_only=True)
class ExportedReport:
    """A rendered report document."""

    content: bytes
    media_type: str
    extension: str


type Exporter = Callable[[TestResult, ReportConfig, datetime], ExportedReport]


def summary_rows(result: TestResult) -> Sequence[tuple[str, str]]:
    """Label/value pairs of the summary block, in display order."""
    return [
        ("Overall Status", result.overall.upper()),
        ("Score", f"{result.score}/100"),
        ("Total Tests", str(result.summary.total)),
        ("Passed", str(result.summary.passed)),
        ("Failed", str(result.summary.failed)),
        ("Warnings", str(result.summary.warnings)),
    ]


def dump_result(result: TestResult) -> str:
    """Full structured dump of the result as indented JSON."""
    return json.dumps(result.to_wire(), indent=2, ensure_ascii=False)


def flatten(value: Any, prefix: str = "") -> Iterator[tuple[str, str]]:
    """Flatten nested wire data into dotted-path/value pairs.

    Empty lists and objects are kept as a single row so no field is lost.
    """
    if isinstance(value, dict) and value:
        for key, item in value.items():
            yield from flatten(item, f"{prefix}.{key}" if prefix else key)
    elif isinstance(value, list) and value:
        for index, item in enumerate(value):
            yield from flatten(item, f"{prefix}.{index}")
    elif isinstance(value, dict | list):
        yield prefix, json.dumps(value)
    elif value is None:
        yield prefix, ""
    else:
        yield prefix, str(value).lower() if isinstance(value, bool) else str(value)


def generated_line(now: datetime) -> str:
    """Footer line carrying the generation timestamp."""
    return f"Generated on {now:%Y-%m-%d %H:%M:%S %Z}".rstrip()
