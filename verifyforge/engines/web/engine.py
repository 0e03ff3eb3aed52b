"""Website prober engine."""

import logging
import time
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import aiohttp
from yarl import URL

from verifyforge.engines.base import (
    EngineExecutionError,
    ProgressCallback,
    TestEngine,
)
from verifyforge.engines.web.config import WebEngineConfig
from verifyforge.engines.web.parsing import PageStructure, parse_page, split_links
from verifyforge.models.job import Target
from verifyforge.models.result import (
    Issue,
    LinksAnalysis,
    PerformanceMetrics,
    SeoAnalysis,
    Summary,
    TestResult,
)
from verifyforge.progress import ProgressSnapshot

log = logging.getLogger(__name__)

TOTAL_CHECKS = 15
SEVERITY_PENALTY = {"high": 10, "medium": 5, "low": 2}


@dataclass(frozen=True, kw_only=True)
class WebEngine(TestEngine):
    """Fetches a website and checks connectivity, performance, SEO and links."""

    config: WebEngineConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: WebEngineConfig
    ) -> AsyncGenerator["WebEngine", None]:
        """Create engine with managed session lifecycle."""
        async with aiohttp.ClientSession(
            headers={"User-Agent": config.user_agent},
            timeout=aiohttp.ClientTimeout(total=config.timeout_seconds),
        ) as session:
            yield cls(config=config, session=session)

    async def run(self, target: Target, progress: ProgressCallback) -> TestResult:
        """Probe the target URL and score what was found."""
        if not target.url:
            raise EngineExecutionError("URL required for web testing")
        url = _parse_url(target.url)

        def report(stage: str, value: int, message: str) -> None:
            progress(ProgressSnapshot(stage=stage, progress=value, message=message))

        report("fetch", 10, "Fetching website...")
        started = time.perf_counter()
        try:
            async with self.session.get(url) as response:
                html = await response.text(errors="replace")
                status = response.status
                ok = response.ok
        except (aiohttp.ClientError, TimeoutError) as e:
            raise EngineExecutionError(f"Could not fetch {url}: {e!r}") from e
        load_time = round((time.perf_counter() - started) * 1000)
        page_size = len(html.encode())

        issues: list[Issue] = []
        recommendations: list[str] = []

        if not ok:
            issues.append(
                Issue(
                    severity="high",
                    category="Connectivity",
                    message=f"Website returned {status} status code",
                    suggestion=(
                        "Check if the website is accessible and properly configured"
                    ),
                )
            )

        report("parse", 25, "Parsing HTML structure...")
        page = parse_page(html)

        report("links", 40, "Checking links...")
        origin = str(url.origin())
        links = split_links(page.links, origin)
        to_check = list(links.internal[: self.config.max_links_checked])
        report("links", 50, f"Verifying {len(to_check)} links...")
        broken_links = await self._find_broken_links(url, to_check)

        report("performance", 65, "Analyzing performance...")
        if load_time > self.config.slow_response_ms:
            issues.append(
                Issue(
                    severity="medium",
                    category="Performance",
                    message=f"Slow page load time: {load_time / 1000:.2f}s",
                    suggestion=(
                        "Consider optimizing server response time, "
                        "implementing caching, or using a CDN"
                    ),
                )
            )
            recommendations.append("Optimize server response time and implement caching")
        if page_size > self.config.large_page_bytes:
            issues.append(
                Issue(
                    severity="medium",
                    category="Performance",
                    message=f"Large page size: {page_size / 1024:.0f}KB",
                    suggestion="Compress HTML, minify CSS/JS, and optimize images",
                )
            )
            recommendations.append("Implement gzip compression and minify assets")

        report("seo", 80, "Analyzing SEO...")
        issues.extend(_seo_issues(page))

        report("accessibility", 90, "Checking accessibility...")
        if page.images_without_alt > 0:
            issues.append(
                Issue(
                    severity="medium",
                    category="Accessibility",
                    message=(
                        f"{page.images_without_alt} of {page.image_count} "
                        "images missing alt text"
                    ),
                    suggestion=(
                        "Add descriptive alt text to all images for screen readers"
                    ),
                )
            )
            recommendations.append(
                "Add alt text to all images for better accessibility"
            )

        report("finalize", 95, "Generating report...")
        if load_time < 1000:
            recommendations.append(
                "Great page load time! Consider implementing a CDN for global users"
            )
        if broken_links:
            recommendations.append(f"Fix {len(broken_links)} broken internal links")
        else:
            recommendations.append("All checked links are working correctly")
        if not issues:
            recommendations.append("Excellent! No major issues found")

        score = max(0, min(100, 100 - sum(SEVERITY_PENALTY[i.severity] for i in issues)))
        failed = sum(1 for i in issues if i.severity == "high")
        warnings = len(issues) - failed
        total = max(TOTAL_CHECKS, failed + warnings)

        report("complete", 100, "Test complete!")

        return TestResult(
            overall="pass" if score >= 80 else "warning" if score >= 60 else "fail",
            score=score,
            summary=Summary(
                total=total,
                passed=total - failed - warnings,
                failed=failed,
                warnings=warnings,
            ),
            issues=issues,
            recommendations=recommendations,
            performance_metrics=PerformanceMetrics(
                load_time=load_time,
                page_size=page_size,
                request_count=1,
                response_code=status,
            ),
            seo_analysis=SeoAnalysis(
                title=page.title,
                title_length=len(page.title),
                meta_description=page.meta_description,
                meta_description_length=len(page.meta_description),
                h1_count=page.h1_count,
                image_count=page.image_count,
                images_without_alt=page.images_without_alt,
            ),
            links_analysis=LinksAnalysis(
                total_links=len(page.links),
                internal_links=len(links.internal),
                external_links=len(links.external),
                broken_links=broken_links,
            ),
        )

    async def _find_broken_links(self, base: URL, links: Sequence[str]) -> list[str]:
        """HEAD-check links against the page's origin and return the failing ones."""
        broken: list[str] = []
        origin = base.origin()
        for link in links:
            try:
                full_url = origin.join(URL(link))
                async with self.session.head(full_url, allow_redirects=True) as response:
                    if not response.ok:
                        broken.append(link)
            except (aiohttp.ClientError, TimeoutError, ValueError) as e:
                log.debug("Link check failed for %s: %s", link, e)
                broken.append(link)
        return broken


def _parse_url(raw: str) -> URL:
    try:
        url = URL(raw.strip())
    except ValueError as e:
        raise EngineExecutionError("Invalid URL format") from e
    if url.scheme not in {"http", "https"} or not url.host:
        raise EngineExecutionError("Invalid URL format")
    return url


def _seo_issues(page: PageStructure) -> list[Issue]:
    issues: list[Issue] = []

    if not page.title:
        issues.append(
            Issue(
                severity="high",
                category="SEO",
                message="Missing page title",
                suggestion="Add a descriptive title tag to improve SEO",
            )
        )
    elif not 30 <= len(page.title) <= 60:
        issues.append(
            Issue(
                severity="low",
                category="SEO",
                message=(
                    f"Title length ({len(page.title)} chars) not optimal "
                    "(30-60 recommended)"
                ),
                suggestion="Optimize title length for better search engine display",
            )
        )

    if not page.meta_description:
        issues.append(
            Issue(
                severity="medium",
                category="SEO",
                message="Missing meta description",
                suggestion="Add a compelling meta description (150-160 characters)",
            )
        )
    elif not 120 <= len(page.meta_description) <= 160:
        issues.append(
            Issue(
                severity="low",
                category="SEO",
                message=(
                    f"Meta description length ({len(page.meta_description)} chars) "
                    "not optimal"
                ),
                suggestion="Keep meta descriptions between 120-160 characters",
            )
        )

    if page.h1_count == 0:
        issues.append(
            Issue(
                severity="medium",
                category="SEO",
                message="No H1 heading found",
                suggestion="Add a single H1 heading that describes the page content",
            )
        )
    elif page.h1_count > 1:
        issues.append(
            Issue(
                severity="low",
                category="SEO",
                message=f"Multiple H1 headings found ({page.h1_count})",
                suggestion="Use only one H1 heading per page for better SEO",
            )
        )

    return issues
