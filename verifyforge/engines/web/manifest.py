"""Web engine manifest."""

from verifyforge.engines.manifest import EngineManifest
from verifyforge.engines.web.config import WebEngineConfig
from verifyforge.engines.web.engine import WebEngine

web_engine_manifest = EngineManifest(
    config_cls=WebEngineConfig,
    engine_factory=WebEngine.from_config,
)
