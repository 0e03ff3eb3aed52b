"""Abstract base class for test engines."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from verifyforge.models.job import Target
from verifyforge.models.result import TestResult
from verifyforge.progress import ProgressSnapshot

type ProgressCallback = Callable[[ProgressSnapshot], None]


class EngineExecutionError(Exception):
    """Raised by an engine when it cannot test the target."""


@dataclass(frozen=True, kw_only=True)
class TestEngine(ABC):
    """Abstract base for engines that test one kind of target."""

    __test__ = False

    @abstractmethod
    async def run(self, target: Target, progress: ProgressCallback) -> TestResult:
        """Test the target and return its canonical result.

        Args:
            target: URL and/or uploaded file to test
            progress: Callback receiving progress snapshots while running

        Returns:
            Canonical result of the test

        Raises:
            EngineExecutionError: If the target cannot be tested

        """
