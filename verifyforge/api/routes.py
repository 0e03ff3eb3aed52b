"""HTTP handlers for submissions, credits, progress and report downloads."""

import logging

from aiohttp import web
from pydantic import ValidationError

from verifyforge.api.validation import RequestValidationError, parse_submission
from verifyforge.engines.registry import EngineRegistry
from verifyforge.ledger import CreditLedger, InsufficientCreditsError
from verifyforge.orchestrator import SubmissionOrchestrator
from verifyforge.progress import ProgressTracker
from verifyforge.reporting import ReportConfig, export, parse_format
from verifyforge.store import JobStore

log = logging.getLogger(__name__)

LEDGER_KEY = web.AppKey("ledger", CreditLedger)
TRACKER_KEY = web.AppKey("tracker", ProgressTracker)
REGISTRY_KEY = web.AppKey("registry", EngineRegistry)
STORE_KEY = web.AppKey("store", JobStore)

REPORT_CONFIG_PARAMS = ("title", "companyName", "logo", "includeCharts", "whiteLabel")

routes = web.RouteTableDef()


def _orchestrator(app: web.Application) -> SubmissionOrchestrator:
    return SubmissionOrchestrator(
        ledger=app[LEDGER_KEY],
        tracker=app[TRACKER_KEY],
        registry=app[REGISTRY_KEY],
        store=app[STORE_KEY],
    )


@routes.get("/healthz")
async def healthz(request: web.Request) -> web.Response:
    """Liveness probe."""
    return web.json_response({"ok": True})


@routes.post("/api/tests/submit")
async def submit_test(request: web.Request) -> web.Response:
    """Charge for and run a test, returning the assembled job."""
    submission = parse_submission(await request.post())

    try:
        job = await _orchestrator(request.app).submit(submission)
    except InsufficientCreditsError as e:
        log.warning("Submission rejected: %s", e)
        return web.json_response(
            {
                "error": "No credits remaining",
                "message": (
                    "You have used all your free tests. Please upgrade to continue."
                ),
                "freeTests": e.balance.free_tests,
                "paidCredits": e.balance.paid_credits,
            },
            status=402,
        )

    return web.json_response(job.to_wire())


@routes.get("/api/tests/submit")
async def query_tests(request: web.Request) -> web.Response:
    """Report credits, progress of a job, or a completed job."""
    action = request.query.get("action")
    job_id = request.query.get("id")

    if action == "credits":
        return web.json_response(request.app[LEDGER_KEY].balance().to_wire())

    if action == "progress":
        if not job_id:
            raise RequestValidationError("Missing test ID")
        lookup = request.app[TRACKER_KEY].lookup(job_id)
        return web.json_response({**lookup.snapshot.to_wire(), "state": lookup.state})

    if action is None and job_id:
        job = await request.app[STORE_KEY].get(job_id)
        if job is None:
            return web.json_response({"error": "Test not found"}, status=404)
        return web.json_response(job.to_wire())

    raise RequestValidationError("Invalid action")


@routes.get("/api/reports/{job_id}/download")
async def download_report(request: web.Request) -> web.Response:
    """Export a completed job's result as a downloadable document."""
    job_id = request.match_info["job_id"]
    report_format = parse_format(request.query.get("format", "pdf"))

    job = await request.app[STORE_KEY].get(job_id)
    if job is None:
        return web.json_response({"error": "Test not found"}, status=404)

    try:
        config = ReportConfig.model_validate(
            {k: request.query[k] for k in REPORT_CONFIG_PARAMS if k in request.query}
        )
    except ValidationError as e:
        raise RequestValidationError(f"Invalid report options: {e}") from e
    report = export(job.results, report_format, config)

    return web.Response(
        body=report.content,
        content_type=report.media_type,
        headers={
            "Content-Disposition": (
                f'attachment; filename="{job_id}.{report.extension}"'
            )
        },
    )
