"""Engine manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from verifyforge.engines.base import TestEngine


@dataclass(frozen=True, kw_only=True)
class EngineManifest[ConfigT: BaseModel]:
    """Manifest describing an engine plugin.

    The manifest holds the engine's configuration class and a factory that
    builds the engine inside a managed context, so engines are only
    instantiated for the keys the service is configured to run.
    """

    config_cls: type[ConfigT]
    engine_factory: Callable[[ConfigT], AbstractAsyncContextManager[TestEngine]]
