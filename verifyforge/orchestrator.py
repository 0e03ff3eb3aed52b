"""Submission orchestrator: credits, dispatch, progress and assembly."""

import logging
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from verifyforge.assembler import assemble
from verifyforge.engines.outcome import EngineFailed, render_outcome
from verifyforge.engines.registry import EngineRegistry
from verifyforge.ledger import CreditLedger, CreditOutcome
from verifyforge.models.job import JobStatus, Mode, Target, TestJob, TestType
from verifyforge.progress import ProgressSnapshot, ProgressTracker
from verifyforge.store import JobStore

log = logging.getLogger(__name__)

ID_ALPHABET = string.digits + string.ascii_lowercase


def _utcnow() -> datetime:
    return datetime.now(UTC)


def generate_job_id(now: datetime) -> str:
    """Generate a job id like ``test_1700000000000_k3j9x0a2b``."""
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(9))
    return f"test_{int(now.timestamp() * 1000)}_{suffix}"


@dataclass(frozen=True, kw_only=True)
class Submission:
    """A validated request to run one test."""

    test_type: TestType
    target: Target
    mode: Mode = Mode.STANDARD


@dataclass(frozen=True, kw_only=True)
class SubmissionOrchestrator:
    """Runs a submission from credit check to stored job record."""

    ledger: CreditLedger
    tracker: ProgressTracker
    registry: EngineRegistry
    store: JobStore
    clock: Callable[[], datetime] = field(default=_utcnow, repr=False)

    async def submit(self, submission: Submission) -> TestJob:
        """Charge for, run and record a submission.

        Any failure after charging refunds the charge before it propagates.

        Args:
            submission: Validated submission

        Returns:
            The assembled job record, also saved in the job store

        Raises:
            InsufficientCreditsError: If the caller cannot pay; nothing is
                dispatched in that case

        """
        credit_outcome = await self.ledger.authorize_and_charge(
            submission.test_type, submission.mode
        )
        try:
            job = await self._run(submission, credit_outcome)
            await self.store.save(job)
        except Exception:
            log.warning("Submission failed after charging, refunding", exc_info=True)
            await self.ledger.refund(credit_outcome)
            raise

        log.info(
            "Job %s completed: type=%s score=%d duration=%s",
            job.id,
            job.test_type,
            job.results.score,
            job.duration,
        )
        return job

    async def _run(
        self, submission: Submission, credit_outcome: CreditOutcome
    ) -> TestJob:
        """Dispatch to the engine and assemble the job record."""
        started_at = self.clock()
        job_id = generate_job_id(started_at)
        log.info(
            "Submission %s: type=%s target=%s mode=%s free=%s charged=%d",
            job_id,
            submission.test_type,
            submission.target.describe(),
            submission.mode,
            credit_outcome.used_free_test,
            credit_outcome.credits_charged,
        )

        self.tracker.set(
            job_id,
            ProgressSnapshot(stage="initializing", progress=0, message="Starting test..."),
        )
        try:
            outcome = await self.registry.dispatch(
                submission.test_type,
                submission.target,
                lambda snapshot: self.tracker.set(job_id, snapshot),
            )
            completed_at = self.clock()
            job = assemble(
                job_id=job_id,
                test_type=submission.test_type,
                target=submission.target.describe(),
                mode=submission.mode,
                credit_outcome=credit_outcome,
                raw_result=render_outcome(outcome),
                started_at=started_at,
                completed_at=completed_at,
                balance=self.ledger.balance(),
                status=(
                    JobStatus.FAILED
                    if isinstance(outcome, EngineFailed)
                    else JobStatus.COMPLETED
                ),
            )
        finally:
            self.tracker.clear(job_id)
        return job
