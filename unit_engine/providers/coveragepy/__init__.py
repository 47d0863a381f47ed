"""coverage.py provider module."""

from unit_engine.providers.coveragepy.config import CoveragePyConfig
from unit_engine.providers.coveragepy.manifest import coveragepy_manifest
from unit_engine.providers.coveragepy.provider import CoveragePyProvider

__all__ = ["CoveragePyConfig", "CoveragePyProvider", "coveragepy_manifest"]
