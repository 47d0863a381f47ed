"""Models for test method results."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

TestStatus = Literal["pass", "fail", "skip", "error"]


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single test method execution.

    Produced exactly once per test method and never mutated afterwards.
    """

    __test__ = False

    namespace: str
    name: str
    status: TestStatus
    duration: float
    message: str | None = None
    coverage: Mapping[str, str] = field(default_factory=dict)
    link: str | None = None
