"""Storage of completed jobs."""

import logging
from typing import Protocol

from verifyforge.models.job import TestJob

log = logging.getLogger(__name__)


class JobStore(Protocol):
    """Persistence collaborator for completed jobs."""

    async def save(self, job: TestJob) -> None:
        """Store a completed job."""

    async def get(self, job_id: str) -> TestJob | None:
        """Return a stored job, or None if unknown."""


class InMemoryJobStore:
    """Process-local job store."""

    def __init__(self) -> None:
        self._jobs: dict[str, TestJob] = {}

    async def save(self, job: TestJob) -> None:
        """Store a completed job. Job ids are never reassigned."""
        if job.id in self._jobs:
            raise ValueError(f"Job {job.id} already stored")
        self._jobs[job.id] = job
        log.debug("Stored job %s", job.id)

    async def get(self, job_id: str) -> TestJob | None:
        """Return a stored job, or None if unknown."""
        return self._jobs.get(job_id)
