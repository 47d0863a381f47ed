"""Tests for the coverage.py provider."""

import importlib.util
from pathlib import Path

import pytest

from unit_engine.providers.base import LineCoverage, filter_coverage
from unit_engine.providers.coveragepy import CoveragePyConfig, CoveragePyProvider
from unit_engine.signals import CoverageUnavailableError

MODULE_SOURCE = """\
def classify(value):
    if value > 0:
        return "positive"
    return "non-positive"
"""


@pytest.fixture
def module_path(tmp_path: Path) -> Path:
    """Write a small module to measure."""
    path = tmp_path.resolve() / "classify_module.py"
    path.write_text(MODULE_SOURCE)
    return path


def import_and_call(path: Path) -> str:
    """Import the module at ``path`` and call its function."""
    spec = importlib.util.spec_from_file_location("classify_module", path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.classify(1)


def test_captures_line_statuses(module_path: Path) -> None:
    """Classifies executed and missed statements."""
    config = CoveragePyConfig(source=[str(module_path.parent)])

    with CoveragePyProvider.from_config(config) as provider:
        with provider.capture() as holder:
            assert import_and_call(module_path) == "positive"

    lines = holder.raw[str(module_path)]
    assert lines == {
        1: LineCoverage.COVERED,
        2: LineCoverage.COVERED,
        3: LineCoverage.COVERED,
        4: LineCoverage.NOT_COVERED,
    }
    assert filter_coverage(holder.raw, project_root=module_path.parent) == {
        "classify_module.py": "CCCU"
    }


def test_each_capture_is_independent(module_path: Path) -> None:
    """Does not carry data over from a previous capture."""
    config = CoveragePyConfig(source=[str(module_path.parent)])

    with CoveragePyProvider.from_config(config) as provider:
        with provider.capture():
            import_and_call(module_path)
        with provider.capture() as holder:
            pass

    executed = [
        line
        for line, status in holder.raw.get(str(module_path), {}).items()
        if status is LineCoverage.COVERED
    ]
    assert executed == []


def test_captures_are_exclusive() -> None:
    """Refuses to start a second capture."""
    with CoveragePyProvider.from_config(CoveragePyConfig(source=["."])) as provider:
        with provider.capture():
            with pytest.raises(RuntimeError, match="already active"):
                provider.start()


def test_stop_without_start() -> None:
    """Refuses to stop a capture that never started."""
    provider = CoveragePyProvider(config=CoveragePyConfig())

    with pytest.raises(RuntimeError, match="No coverage capture is active"):
        provider.stop()


def test_context_exit_stops_active_capture() -> None:
    """Stops a capture left running when the provider context closes."""
    with CoveragePyProvider.from_config(CoveragePyConfig(source=["."])) as provider:
        provider.start()

    assert not provider.active


def test_unavailable_without_coverage_installed(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Raises a fatal error when coverage.py cannot be imported."""
    monkeypatch.setattr(importlib.util, "find_spec", lambda name: None)

    with pytest.raises(CoverageUnavailableError, match="not installed"):
        with CoveragePyProvider.from_config(CoveragePyConfig()):
            pass  # pragma: no cover
