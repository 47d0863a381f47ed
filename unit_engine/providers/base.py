"""Abstract base class for line coverage providers."""

import enum
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path, PurePath

RawCoverage = Mapping[str, Mapping[int, "LineCoverage"]]


class LineCoverage(enum.Enum):
    """Execution status of one source line."""

    COVERED = "C"
    NOT_COVERED = "U"
    NOT_EXECUTABLE = "N"


@dataclass(kw_only=True)
class CoverageCapture:
    """Holds the raw coverage of one capture once it has been stopped."""

    raw: RawCoverage = field(default_factory=dict)


class CoverageProvider(ABC):
    """Abstract base for coverage providers.

    Coverage tracking is process-wide state: only one capture may be active
    at a time, and every capture is stopped before the next one starts.
    """

    @abstractmethod
    def start(self) -> None:
        """Begin tracking executed lines.

        Raises:
            RuntimeError: If a capture is already active

        """

    @abstractmethod
    def stop(self) -> RawCoverage:
        """Stop tracking and return line statuses keyed by absolute file path.

        Lines absent from a file's mapping are treated as not executable.
        """

    @contextmanager
    def capture(self) -> Iterator[CoverageCapture]:
        """Track coverage for the duration of the block.

        The capture is stopped on every exit path, including exceptions
        raised inside the block.
        """
        holder = CoverageCapture()
        self.start()
        try:
            yield holder
        finally:
            holder.raw = self.stop()


def encode_line_coverage(lines: Mapping[int, LineCoverage]) -> str:
    """Encode a sparse line map as one character per line, starting at line 1."""
    if not lines:
        return ""
    return "".join(
        lines.get(number, LineCoverage.NOT_EXECUTABLE).value
        for number in range(1, max(lines) + 1)
    )


def filter_coverage(
    raw: RawCoverage,
    project_root: Path | None = None,
    paths: Sequence[str] | None = None,
) -> dict[str, str]:
    """Encode raw coverage, keeping only files relevant to the change.

    Args:
        raw: Line statuses keyed by file path
        project_root: Absolute files outside this directory are dropped and
            the rest are keyed relative to it; a relative root is resolved
            against the working directory
        paths: When given, only these keys are kept, in this order

    Returns:
        Encoded coverage strings keyed by file path

    """
    root = Path(project_root).resolve() if project_root is not None else None

    coverage: dict[str, str] = {}
    for file, lines in raw.items():
        key = file
        # Relative keys are already relative to the project root.
        if root is not None and PurePath(file).is_absolute():
            try:
                key = PurePath(file).relative_to(root).as_posix()
            except ValueError:
                continue
        coverage[key] = encode_line_coverage(lines)

    if paths:
        return {path: coverage[path] for path in paths if path in coverage}

    return coverage
