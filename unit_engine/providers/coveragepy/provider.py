"""coverage.py backed coverage provider."""

import importlib.util
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from unit_engine.providers.base import CoverageProvider, LineCoverage, RawCoverage
from unit_engine.providers.coveragepy.config import CoveragePyConfig
from unit_engine.signals import CoverageUnavailableError

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class CoveragePyProvider(CoverageProvider):
    """Coverage provider measuring lines with coverage.py.

    Each capture uses a fresh in-memory ``coverage.Coverage`` so data never
    leaks from one test method into the next.
    """

    config: CoveragePyConfig
    _coverage: Any = field(default=None, init=False, repr=False)

    @classmethod
    @contextmanager
    def from_config(cls, config: CoveragePyConfig) -> Iterator["CoveragePyProvider"]:
        """Create a provider, making sure no capture outlives the context.

        Raises:
            CoverageUnavailableError: If coverage.py is not installed

        """
        if importlib.util.find_spec("coverage") is None:
            raise CoverageUnavailableError(
                "You've enabled code coverage but coverage.py is not installed."
            )

        provider = cls(config=config)
        try:
            yield provider
        finally:
            if provider.active:
                log.warning("Discarding coverage capture left active")
                provider.stop()

    @property
    def active(self) -> bool:
        """Whether a capture is currently running."""
        return self._coverage is not None

    def start(self) -> None:
        """Begin a new capture."""
        import coverage

        if self.active:
            raise RuntimeError("A coverage capture is already active")

        self._coverage = coverage.Coverage(
            data_file=None,
            config_file=self.config.config_file,
            source=list(self.config.source) if self.config.source else None,
            omit=list(self.config.omit) if self.config.omit else None,
        )
        self._coverage.start()

    def stop(self) -> RawCoverage:
        """Stop the capture and classify every measured line."""
        from coverage.exceptions import NoSource, NotPython

        if not self.active:
            raise RuntimeError("No coverage capture is active")

        cov, self._coverage = self._coverage, None
        cov.stop()

        raw: dict[str, dict[int, LineCoverage]] = {}
        for file in sorted(cov.get_data().measured_files()):
            try:
                _, statements, _, missing, _ = cov.analysis2(file)
            except (NoSource, NotPython) as exc:
                log.debug("Skipping coverage for %s: %s", file, exc)
                continue

            missing_lines = set(missing)
            raw[file] = {
                line: (
                    LineCoverage.NOT_COVERED
                    if line in missing_lines
                    else LineCoverage.COVERED
                )
                for line in statements
            }

        log.debug("Captured coverage for %d file(s)", len(raw))
        return raw
