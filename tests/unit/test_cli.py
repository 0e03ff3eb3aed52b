"""Tests for CLI module."""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from verifyforge.cli import export_to_file, load_result, run
from verifyforge.config import ServiceConfig
from verifyforge.reporting import ReportConfig
from verifyforge.testing.factories import TestResultFactory


@pytest.fixture
def result_file(tmp_path: Path) -> Path:
    """Write a bare result to disk."""
    path = tmp_path / "result.json"
    path.write_text(json.dumps(TestResultFactory.build(score=88).to_wire()))
    return path


def test_load_result_accepts_bare_result(result_file: Path) -> None:
    """Loads a result file."""
    assert load_result(result_file).score == 88


def test_load_result_unwraps_envelope(tmp_path: Path) -> None:
    """Loads the result out of a job record or report envelope."""
    path = tmp_path / "job.json"
    result = TestResultFactory.build(score=55)
    path.write_text(json.dumps({"id": "test_1_x", "results": result.to_wire()}))

    assert load_result(path) == result


def test_export_to_file_defaults_output_path(result_file: Path) -> None:
    """Output defaults to the input path with the format's extension."""
    destination = export_to_file(result_file, "markdown", None, ReportConfig())

    assert destination == result_file.with_suffix(".md")
    assert destination.read_text().startswith("# VerifyForge Test Report")


def test_run_export_writes_file(
    result_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Export command writes the report and prints its path."""
    output = tmp_path / "out" / "report.json"
    output.parent.mkdir()

    exit_code = run(
        [
            "export",
            "--input",
            str(result_file),
            "--format",
            "json",
            "--output",
            str(output),
            "--title",
            "Nightly",
            "--company-name",
            "Acme",
            "--white-label",
        ]
    )

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == str(output)
    meta = json.loads(output.read_text())["meta"]
    assert meta["title"] == "Nightly"
    assert meta["companyName"] == "Acme"


def test_run_export_unsupported_format(
    result_file: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Unsupported formats exit with code 2."""
    with caplog.at_level(logging.ERROR):
        exit_code = run(["export", "--input", str(result_file), "--format", "pptx"])

    assert exit_code == 2
    assert "Unsupported format: pptx" in caplog.text


def test_run_serve_parses_config() -> None:
    """Serve command passes the parsed configuration on."""
    with patch("verifyforge.cli.serve") as serve_mock:
        exit_code = run(["serve", "--config", '{"port": 9000, "free_tests": 5}'])

    assert exit_code == 0
    config = serve_mock.call_args.args[0]
    assert isinstance(config, ServiceConfig)
    assert config.port == 9000
    assert config.free_tests == 5
