"""Tests for submission orchestrator."""

import re
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from verifyforge.engines.base import EngineExecutionError, ProgressCallback
from verifyforge.engines.registry import EngineRegistry
from verifyforge.ledger import CreditAccount, CreditLedger, InsufficientCreditsError
from verifyforge.models.job import JobStatus, Mode, Target, TestType
from verifyforge.models.result import TestResult
from verifyforge.orchestrator import Submission, SubmissionOrchestrator, generate_job_id
from verifyforge.progress import ProgressSnapshot, ProgressState, ProgressTracker
from verifyforge.store import InMemoryJobStore
from verifyforge.testing.engines import ScriptedEngine
from verifyforge.testing.factories import TestResultFactory

STARTED = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)
TARGET = Target(url="https://example.com")


class SteppingClock:
    """Clock advancing by a fixed step on every read."""

    def __init__(self, start: datetime, step: timedelta) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        return now


@pytest.fixture
def ledger() -> CreditLedger:
    """Create ledger with one free test and some paid credits."""
    return CreditLedger(CreditAccount(free_tests=1, paid_credits=20))


@pytest.fixture
def tracker() -> ProgressTracker:
    """Create progress tracker."""
    return ProgressTracker()


@pytest.fixture
def store() -> InMemoryJobStore:
    """Create job store."""
    return InMemoryJobStore()


def make_orchestrator(
    ledger: CreditLedger,
    tracker: ProgressTracker,
    store: InMemoryJobStore,
    registry: EngineRegistry,
) -> SubmissionOrchestrator:
    return SubmissionOrchestrator(
        ledger=ledger,
        tracker=tracker,
        registry=registry,
        store=store,
        clock=SteppingClock(STARTED, timedelta(milliseconds=1500)),
    )


def test_generate_job_id_format() -> None:
    """Ids carry the millisecond timestamp and a base-36 suffix."""
    job_id = generate_job_id(STARTED)

    assert re.fullmatch(r"test_1714564800000_[0-9a-z]{9}", job_id)
    assert generate_job_id(STARTED) != job_id


async def test_submit_runs_engine_and_stores_job(
    ledger: CreditLedger, tracker: ProgressTracker, store: InMemoryJobStore
) -> None:
    """A submission is charged, run, assembled and stored."""
    result = TestResultFactory.build()
    engine = ScriptedEngine(result=result)
    orchestrator = make_orchestrator(
        ledger, tracker, store, EngineRegistry({TestType.WEB: engine})
    )

    job = await orchestrator.submit(Submission(test_type=TestType.WEB, target=TARGET))

    assert job.status is JobStatus.COMPLETED
    assert job.target == "https://example.com"
    assert job.used_free_test is True
    assert job.credits_charged == 0
    assert job.remaining_free_tests == 0
    assert job.remaining_paid_credits == 20
    assert job.duration == "1.50s"
    assert job.results.score == result.score
    assert engine.targets == [TARGET]
    assert await store.get(job.id) == job


async def test_submit_charges_paid_credits_after_free_tests(
    ledger: CreditLedger, tracker: ProgressTracker, store: InMemoryJobStore
) -> None:
    """Second submission is charged at the discounted price."""
    engine = ScriptedEngine(result=TestResultFactory.build())
    orchestrator = make_orchestrator(
        ledger, tracker, store, EngineRegistry({TestType.WEB: engine})
    )

    await orchestrator.submit(Submission(test_type=TestType.WEB, target=TARGET))
    job = await orchestrator.submit(
        Submission(test_type=TestType.WEB, target=TARGET, mode=Mode.ULTRA_ECONOMY)
    )

    assert job.used_free_test is False
    assert job.credits_charged == 4
    assert job.remaining_paid_credits == 16


async def test_submit_rejects_without_credits(
    tracker: ProgressTracker, store: InMemoryJobStore
) -> None:
    """Nothing is dispatched when the caller cannot pay."""
    engine = ScriptedEngine(result=TestResultFactory.build())
    registry = EngineRegistry({TestType.WEB: engine})
    ledger = CreditLedger(CreditAccount(free_tests=0, paid_credits=0))
    orchestrator = make_orchestrator(ledger, tracker, store, registry)

    with pytest.raises(InsufficientCreditsError):
        await orchestrator.submit(Submission(test_type=TestType.WEB, target=TARGET))

    assert engine.targets == []
    assert len(tracker) == 0


async def test_submit_engine_failure_marks_job_failed(
    ledger: CreditLedger, tracker: ProgressTracker, store: InMemoryJobStore
) -> None:
    """Engine errors still produce a stored job, marked failed."""
    engine = ScriptedEngine(error=EngineExecutionError("Invalid URL format"))
    orchestrator = make_orchestrator(
        ledger, tracker, store, EngineRegistry({TestType.WEB: engine})
    )

    job = await orchestrator.submit(Submission(test_type=TestType.WEB, target=TARGET))

    assert job.status is JobStatus.FAILED
    assert job.results.overall == "fail"
    assert job.results.issues[0].message == "Test failed: Invalid URL format"
    assert job.credits_charged == 0
    assert await store.get(job.id) == job


async def test_submit_unregistered_type_completes_with_warning(
    ledger: CreditLedger, tracker: ProgressTracker, store: InMemoryJobStore
) -> None:
    """Types without an engine complete with a not-implemented warning."""
    orchestrator = make_orchestrator(ledger, tracker, store, EngineRegistry())

    job = await orchestrator.submit(
        Submission(test_type=TestType.GAME, target=Target(filename="game.zip"))
    )

    assert job.status is JobStatus.COMPLETED
    assert job.target == "game.zip"
    assert job.results.overall == "warning"
    assert job.results.javari_auto_fix.available is True


async def test_progress_is_tracked_then_cleared(
    ledger: CreditLedger,
    tracker: ProgressTracker,
    store: InMemoryJobStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Engine progress goes to the tracker and is cleared on completion."""
    monkeypatch.setattr(
        "verifyforge.orchestrator.generate_job_id", lambda now: "test_1_fixed"
    )
    seen: list[ProgressSnapshot] = []

    class ObservingEngine(ScriptedEngine):
        """Scripted engine that reads the tracker while running."""

        async def run(
            self, target: Target, progress: ProgressCallback
        ) -> TestResult:
            seen.append(tracker.get("test_1_fixed"))
            progress(ProgressSnapshot(stage="fetch", progress=10))
            seen.append(tracker.get("test_1_fixed"))
            return await super().run(target, progress)

    engine = ObservingEngine(result=TestResultFactory.build())
    orchestrator = make_orchestrator(
        ledger, tracker, store, EngineRegistry({TestType.WEB: engine})
    )

    job = await orchestrator.submit(Submission(test_type=TestType.WEB, target=TARGET))

    assert job.id == "test_1_fixed"
    assert seen == [
        ProgressSnapshot(stage="initializing", progress=0, message="Starting test..."),
        ProgressSnapshot(stage="fetch", progress=10),
    ]
    assert tracker.lookup(job.id).state is ProgressState.COMPLETED


async def test_store_failure_refunds_and_propagates(
    ledger: CreditLedger, tracker: ProgressTracker
) -> None:
    """Persistence errors refund the free test and surface to the caller."""
    store = AsyncMock()
    store.save.side_effect = RuntimeError("disk full")
    orchestrator = make_orchestrator(
        ledger,
        tracker,
        store,
        EngineRegistry({TestType.WEB: ScriptedEngine(result=TestResultFactory.build())}),
    )

    with pytest.raises(RuntimeError, match="disk full"):
        await orchestrator.submit(Submission(test_type=TestType.WEB, target=TARGET))

    assert ledger.account.free_tests == 1
    assert ledger.account.paid_credits == 20


async def test_failure_after_charge_refunds_paid_credits(
    tracker: ProgressTracker,
) -> None:
    """Paid credits are returned when the job cannot be recorded."""
    ledger = CreditLedger(CreditAccount(free_tests=0, paid_credits=20))
    store = AsyncMock()
    store.save.side_effect = RuntimeError("disk full")
    orchestrator = make_orchestrator(
        ledger,
        tracker,
        store,
        EngineRegistry({TestType.WEB: ScriptedEngine(result=TestResultFactory.build())}),
    )

    with pytest.raises(RuntimeError):
        await orchestrator.submit(
            Submission(test_type=TestType.WEB, target=TARGET, mode=Mode.ECONOMY)
        )

    assert ledger.account.paid_credits == 20
