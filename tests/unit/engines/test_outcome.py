"""Tests for engine outcome rendering."""

from verifyforge.engines.outcome import (
    FAILURE_RECOMMENDATIONS,
    EngineCompleted,
    EngineFailed,
    EngineNotImplemented,
    render_outcome,
)
from verifyforge.testing.factories import TestResultFactory


def test_completed_outcome_returns_engine_result() -> None:
    """A completed outcome is passed through unchanged."""
    result = TestResultFactory.build()

    assert render_outcome(EngineCompleted(result=result)) is result


def test_not_implemented_outcome() -> None:
    """Unregistered types render as a single warning."""
    result = render_outcome(EngineNotImplemented(test_type="game"))

    assert result.overall == "warning"
    assert result.score == 0
    assert result.summary.to_wire() == {
        "total": 1,
        "passed": 0,
        "failed": 0,
        "warnings": 1,
    }
    assert len(result.issues) == 1
    assert result.issues[0].severity == "medium"
    assert result.issues[0].category == "Not Implemented"
    assert result.issues[0].message == "Testing for 'game' is not yet implemented"
    assert list(result.recommendations) == ["Support for game testing is coming soon"]


def test_failed_outcome() -> None:
    """Engine failures render as a single high-severity issue."""
    result = render_outcome(EngineFailed(message="Invalid URL format"))

    assert result.overall == "fail"
    assert result.score == 0
    assert result.summary.failed == 1
    assert result.summary.total == 1
    assert result.issues[0].severity == "high"
    assert result.issues[0].category == "Testing Error"
    assert result.issues[0].message == "Test failed: Invalid URL format"
    assert result.issues[0].suggestion == "Check your input and try again"
    assert list(result.recommendations) == list(FAILURE_RECOMMENDATIONS)


def test_synthetic_results_carry_zeroed_details() -> None:
    """Synthetic results have the same detail blocks as engine results."""
    for outcome in (EngineNotImplemented(test_type="ai"), EngineFailed(message="x")):
        wire = render_outcome(outcome).to_wire()

        assert wire["performanceMetrics"] == {
            "loadTime": 0,
            "pageSize": 0,
            "requestCount": 0,
            "responseCode": 0,
        }
        assert wire["seoAnalysis"]["titleLength"] == 0
        assert wire["linksAnalysis"]["brokenLinks"] == []
