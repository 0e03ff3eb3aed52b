"""Tagged outcomes of an engine dispatch and their rendering into results."""

from collections.abc import Sequence
from dataclasses import dataclass

from verifyforge.models.result import (
    Issue,
    LinksAnalysis,
    PerformanceMetrics,
    SeoAnalysis,
    Summary,
    TestResult,
)

FAILURE_RECOMMENDATIONS: Sequence[str] = (
    "Verify the input is correct",
    "Check if the resource is accessible",
    "Try a different test configuration",
)


@dataclass(frozen=True, kw_only=True)
class EngineCompleted:
    """The engine ran and produced a result."""

    result: TestResult


@dataclass(frozen=True, kw_only=True)
class EngineNotImplemented:
    """No engine is registered for the test type."""

    test_type: str


@dataclass(frozen=True, kw_only=True)
class EngineFailed:
    """The engine raised while testing the target."""

    message: str


type EngineOutcome = EngineCompleted | EngineNotImplemented | EngineFailed


def render_outcome(outcome: EngineOutcome) -> TestResult:
    """Render any outcome into a TestResult with the same shape."""
    match outcome:
        case EngineCompleted(result=result):
            return result
        case EngineNotImplemented(test_type=test_type):
            return _zeroed_result(
                overall="warning",
                summary=Summary(total=1, passed=0, failed=0, warnings=1),
                issue=Issue(
                    severity="medium",
                    category="Not Implemented",
                    message=f"Testing for '{test_type}' is not yet implemented",
                    suggestion="Choose a supported test type or try again later",
                ),
                recommendations=[f"Support for {test_type} testing is coming soon"],
            )
        case EngineFailed(message=message):
            return _zeroed_result(
                overall="fail",
                summary=Summary(total=1, passed=0, failed=1, warnings=0),
                issue=Issue(
                    severity="high",
                    category="Testing Error",
                    message=f"Test failed: {message}",
                    suggestion="Check your input and try again",
                ),
                recommendations=list(FAILURE_RECOMMENDATIONS),
            )


def _zeroed_result(
    *,
    overall: str,
    summary: Summary,
    issue: Issue,
    recommendations: Sequence[str],
) -> TestResult:
    return TestResult(
        overall=overall,
        score=0,
        summary=summary,
        issues=[issue],
        recommendations=recommendations,
        performance_metrics=PerformanceMetrics(),
        seo_analysis=SeoAnalysis(),
        links_analysis=LinksAnalysis(),
    )
