"""Loading of coverage providers from entry points."""

from importlib.metadata import entry_points
from typing import Any

from unit_engine.providers.manifest import CoverageManifest
from unit_engine.signals import CoverageUnavailableError

ENTRY_POINT_GROUP = "unit_engine.coverage"


def load_coverage_manifest(key: str) -> CoverageManifest[Any]:
    """Load a coverage provider manifest by key.

    Args:
        key: The provider key as registered in pyproject.toml
             (e.g., "coveragepy")

    Returns:
        The provider manifest instance

    Raises:
        CoverageUnavailableError: If no provider with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            manifest: CoverageManifest[Any] = entry.load()
            return manifest

    available = [e.name for e in entries]
    raise CoverageUnavailableError(
        f"Coverage provider '{key}' not found. Available providers: {available}"
    )
