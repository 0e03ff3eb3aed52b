"""aiohttp application wiring for the VerifyForge service."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import UTC, datetime

from aiohttp import web

from verifyforge.api.routes import (
    LEDGER_KEY,
    REGISTRY_KEY,
    STORE_KEY,
    TRACKER_KEY,
    routes,
)
from verifyforge.api.validation import RequestValidationError
from verifyforge.config import ServiceConfig
from verifyforge.engines.registry import EngineRegistry
from verifyforge.ledger import CreditAccount, CreditLedger
from verifyforge.progress import ProgressTracker
from verifyforge.reporting import UnsupportedFormatError
from verifyforge.store import InMemoryJobStore, JobStore

log = logging.getLogger(__name__)

type Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Turn caller errors into 400s and unexpected faults into 500s."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except (RequestValidationError, UnsupportedFormatError) as e:
        log.warning("Rejected %s %s: %s", request.method, request.path, e)
        return web.json_response({"error": str(e)}, status=400)
    except Exception as e:
        log.exception("Unhandled error on %s %s", request.method, request.path)
        return web.json_response(
            {
                "error": "Failed to process request",
                "details": str(e),
                "timestamp": datetime.now(UTC).isoformat(),
            },
            status=500,
        )


def create_app(
    config: ServiceConfig,
    registry: EngineRegistry | None = None,
    store: JobStore | None = None,
) -> web.Application:
    """Create the application.

    Args:
        config: Service configuration
        registry: Engines to dispatch to; when omitted, installed engines
            are loaded on startup and closed on shutdown
        store: Job store (default: in-memory)

    Returns:
        The configured application

    """
    app = web.Application(middlewares=[error_middleware])
    app[LEDGER_KEY] = CreditLedger(
        CreditAccount(free_tests=config.free_tests, paid_credits=config.paid_credits),
        overdraft=config.overdraft,
    )
    app[TRACKER_KEY] = ProgressTracker(
        ttl_seconds=config.progress_ttl_seconds,
        max_entries=config.progress_max_entries,
    )
    app[STORE_KEY] = store if store is not None else InMemoryJobStore()

    if registry is not None:
        app[REGISTRY_KEY] = registry
    else:

        async def engines_ctx(app: web.Application) -> AsyncIterator[None]:
            async with EngineRegistry.from_entry_points(
                config.engines, keys=config.enabled_engines
            ) as loaded:
                app[REGISTRY_KEY] = loaded
                yield

        app.cleanup_ctx.append(engines_ctx)

    app.add_routes(routes)
    return app
