"""Discovery of engines installed under the ``verifyforge.engines`` group."""

import logging
from collections.abc import Mapping, Sequence
from importlib.metadata import EntryPoint, entry_points
from typing import Any

from verifyforge.engines.manifest import EngineManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "verifyforge.engines"


class EngineNotFoundError(Exception):
    """Raised when no installed engine serves a test type."""


def _installed() -> Mapping[str, EntryPoint]:
    return {entry.name: entry for entry in entry_points(group=ENTRY_POINT_GROUP)}


def available_engines() -> Sequence[str]:
    """Test types for which an engine is installed, sorted."""
    return sorted(_installed())


def load_engine_manifest(test_type: str) -> EngineManifest[Any]:
    """Import the manifest of the engine installed for a test type.

    Engines are registered in their distribution's metadata, named after
    the test type they serve, e.g. ``web = "pkg.module:manifest"``.

    Raises:
        EngineNotFoundError: If no installed engine is named after the test type

    """
    installed = _installed()
    entry = installed.get(test_type)
    if entry is None:
        raise EngineNotFoundError(
            f"Engine '{test_type}' not found. "
            f"Available engines: {sorted(installed)}"
        )

    log.debug("Loading %s engine from %s", test_type, entry.value)
    manifest: EngineManifest[Any] = entry.load()
    return manifest
