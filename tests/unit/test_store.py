"""Tests for job store."""

from datetime import UTC, datetime

import pytest

from verifyforge.assembler import assemble
from verifyforge.ledger import CreditBalance, CreditOutcome
from verifyforge.models.job import Mode, TestJob, TestType
from verifyforge.store import InMemoryJobStore
from verifyforge.testing.factories import TestResultFactory


def make_job(job_id: str) -> TestJob:
    now = datetime(2024, 5, 1, tzinfo=UTC)
    return assemble(
        job_id=job_id,
        test_type=TestType.WEB,
        target="https://example.com",
        mode=Mode.STANDARD,
        credit_outcome=CreditOutcome(used_free_test=True, credits_charged=0),
        raw_result=TestResultFactory.build(),
        started_at=now,
        completed_at=now,
        balance=CreditBalance(free_tests=2, paid_credits=0, total=2),
    )


async def test_save_and_get() -> None:
    """Stored jobs are returned by id."""
    store = InMemoryJobStore()
    job = make_job("test_1_a")

    await store.save(job)

    assert await store.get("test_1_a") is job
    assert await store.get("test_1_b") is None


async def test_ids_are_never_reassigned() -> None:
    """Saving a second job under the same id fails."""
    store = InMemoryJobStore()
    await store.save(make_job("test_1_a"))

    with pytest.raises(ValueError, match="already stored"):
        await store.save(make_job("test_1_a"))
