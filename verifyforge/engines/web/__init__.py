"""Web engine module."""

from verifyforge.engines.web.config import WebEngineConfig
from verifyforge.engines.web.engine import WebEngine
from verifyforge.engines.web.manifest import web_engine_manifest

__all__ = ["WebEngine", "WebEngineConfig", "web_engine_manifest"]
