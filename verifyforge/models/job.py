"""Models for test submissions and the assembled job record."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from verifyforge.models.base import Model
from verifyforge.models.result import AssembledResult


class TestType(StrEnum):
    """Kinds of targets the service can test."""

    __test__ = False

    WEB = "web"
    DOCUMENT = "document"
    GAME = "game"
    AI = "ai"
    AVATAR = "avatar"
    TOOL = "tool"
    API = "api"
    MOBILE = "mobile"


class Mode(StrEnum):
    """Pricing mode of a submission."""

    STANDARD = "standard"
    ECONOMY = "economy"
    ULTRA_ECONOMY = "ultra_economy"

    @classmethod
    def parse(cls, value: str | None) -> "Mode":
        """Parse a mode string, treating missing or unknown values as standard."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.STANDARD


class JobStatus(StrEnum):
    """Lifecycle of a job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, kw_only=True)
class Target:
    """What a test runs against: a URL, an uploaded file, or both."""

    url: str | None = None
    filename: str | None = None
    content: bytes = field(default=b"", repr=False)

    def describe(self) -> str:
        """Human-readable target used in the job record."""
        return self.url or self.filename or "uploaded-file"


class ReportLinks(Model):
    """Reference paths where the job's report can be fetched."""

    url: str
    download_url: str


class TestJob(Model):
    """Assembled, immutable record of a finished submission."""

    __test__ = False

    id: str
    test_type: TestType
    target: str
    mode: Mode
    status: JobStatus
    credits_charged: int
    used_free_test: bool
    remaining_free_tests: int
    remaining_paid_credits: int
    started_at: datetime
    completed_at: datetime
    duration: str
    results: AssembledResult
    report: ReportLinks
