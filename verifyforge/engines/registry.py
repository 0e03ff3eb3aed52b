"""Registry mapping test types to engines, and dispatch with fallback."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

from verifyforge.engines.base import EngineExecutionError, ProgressCallback, TestEngine
from verifyforge.engines.loading import available_engines, load_engine_manifest
from verifyforge.engines.outcome import (
    EngineCompleted,
    EngineFailed,
    EngineNotImplemented,
    EngineOutcome,
    render_outcome,
)
from verifyforge.models.job import Target
from verifyforge.models.result import TestResult
from verifyforge.progress import ProgressSnapshot

log = logging.getLogger(__name__)


class EngineRegistry:
    """Maps a test type to the engine able to execute it.

    Dispatch never raises: unregistered types and engine failures are
    turned into results with the same shape as a real engine's.
    """

    def __init__(self, engines: Mapping[str, TestEngine] | None = None) -> None:
        self._engines: dict[str, TestEngine] = dict(engines or {})

    @classmethod
    @asynccontextmanager
    async def from_entry_points(
        cls,
        configs: Mapping[str, Mapping[str, Any]] | None = None,
        keys: Sequence[str] | None = None,
    ) -> AsyncGenerator["EngineRegistry", None]:
        """Build every installed (or every requested) engine for the context."""
        configs = configs or {}
        async with AsyncExitStack() as stack:
            registry = cls()
            for key in keys if keys is not None else available_engines():
                manifest = load_engine_manifest(key)
                config = manifest.config_cls(**configs.get(key, {}))
                engine = await stack.enter_async_context(
                    manifest.engine_factory(config)
                )
                registry.register(key, engine)
            log.info("Loaded engines: %s", ", ".join(registry.test_types) or "none")
            yield registry

    @property
    def test_types(self) -> Sequence[str]:
        """Test types with a registered engine."""
        return sorted(self._engines)

    def register(self, test_type: str, engine: TestEngine) -> None:
        """Register the engine serving a test type, replacing any previous one."""
        self._engines[test_type] = engine

    def is_registered(self, test_type: str) -> bool:
        """Check if an engine serves the test type."""
        return test_type in self._engines

    async def dispatch(
        self,
        test_type: str,
        target: Target,
        progress: ProgressCallback,
    ) -> EngineOutcome:
        """Run the matching engine and return its tagged outcome."""
        engine = self._engines.get(test_type)
        if engine is None:
            log.warning("No engine registered for test type %s", test_type)
            return EngineNotImplemented(test_type=test_type)

        log.info("Starting %s test for %s", test_type, target.describe())
        try:
            result = await engine.run(target, _guard(progress))
            if not isinstance(result, TestResult):
                raise EngineExecutionError(
                    f"Engine returned {type(result).__name__} instead of a TestResult"
                )
        except Exception as e:
            log.error("Engine %s failed: %s", test_type, e, exc_info=e)
            return EngineFailed(message=str(e))

        log.info(
            "Completed %s test: overall=%s score=%d",
            test_type,
            result.overall,
            result.score,
        )
        return EngineCompleted(result=result)

    async def execute(
        self,
        test_type: str,
        target: Target,
        progress: ProgressCallback,
    ) -> TestResult:
        """Run the matching engine and render its outcome as a result."""
        return render_outcome(await self.dispatch(test_type, target, progress))


def _guard(progress: ProgressCallback) -> ProgressCallback:
    """Wrap a progress callback so its failures cannot fail the engine."""

    def _forward(snapshot: ProgressSnapshot) -> None:
        try:
            progress(snapshot)
        except Exception:
            log.exception("Progress callback failed for stage %s", snapshot.stage)

    return _forward
