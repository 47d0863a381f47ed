"""Coverage provider manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from unit_engine.providers.base import CoverageProvider

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class CoverageManifest(Generic[ConfigT]):
    """Manifest describing a coverage provider plugin.

    The manifest references the configuration class and the provider
    factory so providers can be loaded lazily by key.
    """

    config_cls: type[ConfigT]
    provider_factory: Callable[[ConfigT], AbstractContextManager[CoverageProvider]]
