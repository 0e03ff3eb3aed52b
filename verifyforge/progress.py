"""Ephemeral progress store for in-flight jobs."""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from pydantic import Field

from verifyforge.models.base import Model

log = logging.getLogger(__name__)


class ProgressSnapshot(Model):
    """Latest known state of a running job."""

    stage: str
    progress: int = Field(..., ge=0, le=100)
    message: str = ""


COMPLETED_SNAPSHOT = ProgressSnapshot(
    stage="complete",
    progress=100,
    message="Test completed or not found",
)


class ProgressState(StrEnum):
    """Whether a job id is unknown, running, or finished."""

    NOT_FOUND = "not_found"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True, kw_only=True)
class ProgressLookup:
    """Result of looking up a job id in the tracker."""

    state: ProgressState
    snapshot: ProgressSnapshot


@dataclass(kw_only=True)
class _Entry:
    snapshot: ProgressSnapshot | None
    expires_at: float


class ProgressTracker:
    """Bounded TTL map from job id to its latest progress snapshot.

    Cleared jobs leave a completion marker until their TTL runs out, so
    "finished" and "never seen" stay distinguishable through lookup().
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()

    def __len__(self) -> int:
        self._evict_expired()
        return len(self._entries)

    def set(self, job_id: str, snapshot: ProgressSnapshot) -> None:
        """Record the latest snapshot for a job.

        Progress never goes backwards for a job: a lower value keeps the
        previous progress but takes the new stage and message.
        """
        self._evict_expired()
        previous = self._entries.pop(job_id, None)
        if previous is not None and previous.snapshot is not None:
            if snapshot.progress < previous.snapshot.progress:
                log.debug(
                    "Ignoring progress regression for %s: %d -> %d",
                    job_id,
                    previous.snapshot.progress,
                    snapshot.progress,
                )
                snapshot = snapshot.model_copy(
                    update={"progress": previous.snapshot.progress}
                )
        self._store(job_id, snapshot)

    def get(self, job_id: str) -> ProgressSnapshot:
        """Return the latest snapshot, or a synthetic completed one."""
        return self.lookup(job_id).snapshot

    def lookup(self, job_id: str) -> ProgressLookup:
        """Return the job's state together with its snapshot."""
        self._evict_expired()
        entry = self._entries.get(job_id)
        if entry is None:
            return ProgressLookup(
                state=ProgressState.NOT_FOUND, snapshot=COMPLETED_SNAPSHOT
            )
        if entry.snapshot is None:
            return ProgressLookup(
                state=ProgressState.COMPLETED, snapshot=COMPLETED_SNAPSHOT
            )
        return ProgressLookup(state=ProgressState.IN_PROGRESS, snapshot=entry.snapshot)

    def clear(self, job_id: str) -> None:
        """Drop a job's snapshot, leaving a completion marker."""
        self._evict_expired()
        self._entries.pop(job_id, None)
        self._store(job_id, None)

    def _store(self, job_id: str, snapshot: ProgressSnapshot | None) -> None:
        self._entries[job_id] = _Entry(
            snapshot=snapshot, expires_at=self._clock() + self.ttl_seconds
        )
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("Evicted progress entry %s", evicted)

    def _evict_expired(self) -> None:
        now = self._clock()
        # Entries are kept in write order and share one TTL.
        while self._entries:
            job_id, entry = next(iter(self._entries.items()))
            if entry.expires_at > now:
                break
            del self._entries[job_id]
