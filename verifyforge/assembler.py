"""Assembly of the canonical job record from an engine result."""

from datetime import datetime

from verifyforge.ledger import CreditBalance, CreditOutcome
from verifyforge.models.job import JobStatus, Mode, ReportLinks, TestJob, TestType
from verifyforge.models.result import AssembledResult, AutoFixSuggestion, TestResult

AUTO_FIX_CONFIDENCE = 90


def auto_fix_suggestion(result: TestResult) -> AutoFixSuggestion:
    """Derive the auto-fix hint from the number of issues found."""
    count = len(result.issues)
    if count == 0:
        return AutoFixSuggestion(
            available=False, confidence=0, message="No issues found to fix"
        )
    return AutoFixSuggestion(
        available=True,
        confidence=AUTO_FIX_CONFIDENCE,
        message=(
            f"Javari AI can automatically fix {count} issue(s) "
            f"with {AUTO_FIX_CONFIDENCE}% confidence"
        ),
    )


def format_duration(started_at: datetime, completed_at: datetime) -> str:
    """Format elapsed time as seconds with two decimals, e.g. "1.25s"."""
    return f"{(completed_at - started_at).total_seconds():.2f}s"


def report_links(job_id: str) -> ReportLinks:
    """Reference paths where a job's report can be viewed and downloaded."""
    return ReportLinks(
        url=f"/reports/{job_id}",
        download_url=f"/api/reports/{job_id}/download",
    )


def assemble(
    *,
    job_id: str,
    test_type: TestType,
    target: str,
    mode: Mode,
    credit_outcome: CreditOutcome,
    raw_result: TestResult,
    started_at: datetime,
    completed_at: datetime,
    balance: CreditBalance,
    status: JobStatus = JobStatus.COMPLETED,
) -> TestJob:
    """Merge an engine result with job metadata into a TestJob.

    Pure: no I/O. The caller clears the job's progress entry afterwards.
    """
    results = AssembledResult(
        **dict(raw_result),
        javari_auto_fix=auto_fix_suggestion(raw_result),
    )
    return TestJob(
        id=job_id,
        test_type=test_type,
        target=target,
        mode=mode,
        status=status,
        credits_charged=credit_outcome.credits_charged,
        used_free_test=credit_outcome.used_free_test,
        remaining_free_tests=balance.free_tests,
        remaining_paid_credits=balance.paid_credits,
        started_at=started_at,
        completed_at=completed_at,
        duration=format_duration(started_at, completed_at),
        results=results,
        report=report_links(job_id),
    )
