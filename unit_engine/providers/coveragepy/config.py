"""Configuration for the coverage.py provider."""

from collections.abc import Sequence

from pydantic import BaseModel


class CoveragePyConfig(BaseModel):
    """Configuration for the coverage.py provider."""

    source: Sequence[str] | None = None
    omit: Sequence[str] | None = None
    # False ignores .coveragerc and friends; a path reads that file instead
    config_file: str | bool = False
