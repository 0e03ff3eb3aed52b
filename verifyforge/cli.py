"""CLI entry point for the VerifyForge service."""

import argparse
import json
import logging
import sys
from pathlib import Path

from aiohttp import web

from verifyforge.api import create_app
from verifyforge.config import ServiceConfig
from verifyforge.models.result import TestResult
from verifyforge.reporting import (
    ExportedReport,
    ReportConfig,
    ReportFormat,
    UnsupportedFormatError,
    export,
)

log = logging.getLogger("verifyforge")


def load_result(path: Path) -> TestResult:
    """Load a TestResult from a JSON file.

    Accepts a bare result, a job record or a JSON report envelope, which
    all carry the result under "results".
    """
    data = json.loads(path.read_text())
    if isinstance(data.get("results"), dict):
        data = data["results"]
    return TestResult.model_validate(data)


def export_to_file(
    input_path: Path,
    report_format: str,
    output_path: Path | None,
    config: ReportConfig,
) -> Path:
    """Export a stored result to a file and return the file's path."""
    result = load_result(input_path)
    report: ExportedReport = export(result, report_format, config)
    destination = output_path or input_path.with_suffix(f".{report.extension}")
    destination.write_bytes(report.content)
    log.info("Wrote %s report to %s", report_format, destination)
    return destination


def serve(config: ServiceConfig) -> None:
    """Run the HTTP service until interrupted."""
    log.info("Starting VerifyForge on %s:%d", config.host, config.port)
    web.run_app(create_app(config), host=config.host, port=config.port, print=None)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Run the VerifyForge test orchestrator or export reports"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve_parser = commands.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument(
        "--config",
        default="{}",
        help="JSON configuration for the service",
    )

    export_parser = commands.add_parser("export", help="Export a result to a report")
    export_parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="JSON file holding a test result or job record",
    )
    export_parser.add_argument(
        "--format",
        required=True,
        help=f"Report format ({', '.join(f.value for f in ReportFormat)})",
    )
    export_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output file (default: input path with the format's extension)",
    )
    export_parser.add_argument("--title", default=None, help="Report title")
    export_parser.add_argument(
        "--company-name", default=None, help="Company name for white-label reports"
    )
    export_parser.add_argument(
        "--white-label",
        action="store_true",
        help="Show the 'Powered by' line with the company name",
    )
    return parser


def run(argv: list[str] | None = None) -> int:
    """Run the CLI and return an exit code."""
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        serve(ServiceConfig.model_validate_json(args.config))
        return 0

    options = {
        "company_name": args.company_name,
        "white_label": args.white_label,
    }
    if args.title:
        options["title"] = args.title
    try:
        destination = export_to_file(
            args.input, args.format, args.output, ReportConfig(**options)
        )
    except UnsupportedFormatError as e:
        log.error("%s", e)
        return 2
    print(destination)
    return 0


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    sys.exit(run())


if __name__ == "__main__":  # pragma: no cover
    main()
