"""Models for the canonical, engine-agnostic test result."""

from collections.abc import Sequence
from typing import Literal, Self

from pydantic import Field, model_validator

from verifyforge.models.base import Model

Overall = Literal["pass", "fail", "warning"]
Severity = Literal["high", "medium", "low"]


class Summary(Model):
    """Counts of checks performed by an engine."""

    total: int = Field(..., ge=0)
    passed: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    warnings: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_counts(self) -> Self:
        if self.passed + self.failed + self.warnings > self.total:
            raise ValueError(
                f"passed + failed + warnings exceeds total: "
                f"{self.passed} + {self.failed} + {self.warnings} > {self.total}"
            )
        return self


class Issue(Model):
    """A single problem found on the target."""

    severity: Severity
    category: str
    message: str
    suggestion: str


class PerformanceMetrics(Model):
    """Timing and size measurements of the fetched target."""

    load_time: int = Field(default=0, description="Load time in milliseconds")
    page_size: int = Field(default=0, description="Body size in bytes")
    request_count: int = 0
    response_code: int = 0


class SeoAnalysis(Model):
    """Structural analysis of the fetched document."""

    title: str = ""
    title_length: int = 0
    meta_description: str = ""
    meta_description_length: int = 0
    h1_count: int = 0
    image_count: int = 0
    images_without_alt: int = 0


class LinksAnalysis(Model):
    """Link inventory of the fetched document."""

    total_links: int = 0
    internal_links: int = 0
    external_links: int = 0
    broken_links: Sequence[str] = Field(default_factory=list)


class TestResult(Model):
    """Canonical result of running one engine against one target."""

    __test__ = False

    overall: Overall
    score: int = Field(..., ge=0, le=100)
    summary: Summary
    issues: Sequence[Issue] = Field(default_factory=list)
    recommendations: Sequence[str] = Field(default_factory=list)
    performance_metrics: PerformanceMetrics | None = None
    seo_analysis: SeoAnalysis | None = None
    links_analysis: LinksAnalysis | None = None


class AutoFixSuggestion(Model):
    """Derived hint on whether issues can be fixed automatically."""

    available: bool
    confidence: int
    message: str


class AssembledResult(TestResult):
    """A TestResult enriched with the auto-fix suggestion."""

    javari_auto_fix: AutoFixSuggestion
