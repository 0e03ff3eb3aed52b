"""Configuration for the VerifyForge service."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, Field

from verifyforge.ledger import DEFAULT_FREE_TESTS, OverdraftPolicy


class ServiceConfig(BaseModel):
    """Configuration for the HTTP service.

    Engine configuration is kept raw here and validated against each
    engine's own config class when the engine is loaded.
    """

    host: str = "127.0.0.1"
    port: int = 8080
    free_tests: int = Field(default=DEFAULT_FREE_TESTS, ge=0)
    paid_credits: int = 0
    overdraft: OverdraftPolicy = OverdraftPolicy.REJECT
    progress_ttl_seconds: float = Field(default=3600, gt=0)
    progress_max_entries: int = Field(default=10_000, gt=0)
    # None loads every installed engine
    enabled_engines: Sequence[str] | None = None
    engines: Mapping[str, Mapping[str, Any]] = Field(default_factory=dict)
