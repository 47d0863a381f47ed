"""Engine configuration."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator

from unit_engine.models.base import Model


class EngineConfig(Model):
    """Settings shared by every test case in a run."""

    enable_coverage: bool = Field(
        default=False, description="Capture line coverage for each test method"
    )
    coverage_provider: str = Field(
        default="coveragepy", description="Entry point key of the coverage provider"
    )
    coverage_config: Mapping[str, Any] = Field(
        default_factory=dict,
        description="Provider specific configuration, validated by the provider",
    )
    paths: Sequence[str] | None = Field(
        default=None,
        description="Only keep coverage for these root-relative paths (None keeps all)",
    )
    project_root: Path | None = Field(
        default=None, description="Coverage outside this directory is discarded"
    )
    seed: int | None = Field(
        default=None, description="Seed for test ordering (None draws a new one)"
    )
    link_base_uri: str | None = Field(
        default=None, description="Base URI used to build a symbol link per result"
    )

    @model_validator(mode="before")
    @classmethod
    def _default_project_root(cls, data: Any) -> Any:
        """Resolve allow-listed paths against the working directory by default."""
        if (
            isinstance(data, Mapping)
            and data.get("paths")
            and data.get("project_root") is None
        ):
            return {**data, "project_root": Path.cwd()}
        return data

    @field_validator("project_root")
    @classmethod
    def _resolve_project_root(cls, value: Path | None) -> Path | None:
        """Make the project root absolute; coverage reports absolute paths."""
        return value.resolve() if value is not None else None
