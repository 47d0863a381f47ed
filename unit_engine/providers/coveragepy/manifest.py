"""coverage.py provider manifest."""

from unit_engine.providers.coveragepy.config import CoveragePyConfig
from unit_engine.providers.coveragepy.provider import CoveragePyProvider
from unit_engine.providers.manifest import CoverageManifest

coveragepy_manifest = CoverageManifest(
    config_cls=CoveragePyConfig,
    provider_factory=CoveragePyProvider.from_config,
)
