"""Runs a single test method and turns its outcome into a result."""

import logging
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from unit_engine.case import TestCase
from unit_engine.links import build_symbol_link
from unit_engine.models.result import TestResult, TestStatus
from unit_engine.providers.base import (
    CoverageCapture,
    CoverageProvider,
    filter_coverage,
)
from unit_engine.signals import (
    CoverageUnavailableError,
    FatalTestError,
    MultipleTestErrors,
    TestControlSignal,
    describe_exception,
)

log = logging.getLogger(__name__)

NO_ASSERTIONS_MESSAGE = (
    "This test case made no assertions. Test cases must make at least one assertion."
)


@dataclass(frozen=True, kw_only=True)
class TestMethodRunner:
    """Executes one test method end-to-end and produces exactly one result."""

    __test__ = False

    coverage: CoverageProvider | None = None
    enable_coverage: bool = False
    project_root: Path | None = None
    paths: Sequence[str] | None = None
    link_base_uri: str | None = None

    def run_test(self, case: TestCase, name: str) -> TestResult:
        """Run test method ``name`` of ``case``.

        Args:
            case: Test case owning the method
            name: Registered test method name

        Returns:
            The result of the test method

        Raises:
            FatalTestError: If the run cannot continue, e.g. coverage is
                enabled but unavailable

        """
        case.reset_assertions()
        started = time.perf_counter()
        capture = CoverageCapture()

        status, message = self._execute(case, name, capture)

        result = TestResult(
            namespace=case.namespace,
            name=name,
            status=status,
            duration=time.perf_counter() - started,
            message=message,
            coverage=filter_coverage(capture.raw, self.project_root, self.paths),
            link=self._link(case, name),
        )
        log.debug("Test %s.%s finished: %s", result.namespace, name, status)
        return result

    def unexecuted_result(
        self, case: TestCase, name: str, status: TestStatus, message: str
    ) -> TestResult:
        """Build the result of a test method that never got to run."""
        return TestResult(
            namespace=case.namespace,
            name=name,
            status=status,
            duration=0.0,
            message=message,
            link=self._link(case, name),
        )

    def _execute(
        self, case: TestCase, name: str, capture: CoverageCapture
    ) -> tuple[TestStatus, str]:
        try:
            case.will_run_one_test(name)
        except FatalTestError:
            raise
        except TestControlSignal as signal:
            return signal.status, signal.message
        except Exception as exc:
            return "fail", describe_exception(exc)

        failures: list[BaseException] = []

        with self._capture_coverage(capture):
            try:
                case.get_test_method(name)()
            except FatalTestError:
                raise
            except (TestControlSignal, Exception) as exc:
                failures.append(exc)

        try:
            case.did_run_one_test(name)
        except FatalTestError:
            raise
        except (TestControlSignal, Exception) as exc:
            failures.append(exc)

        if len(failures) > 1:
            aggregate = MultipleTestErrors(
                "Multiple exceptions were raised during test execution.", failures
            )
            return "fail", describe_exception(aggregate)

        if failures:
            (failure,) = failures
            if isinstance(failure, TestControlSignal):
                return failure.status, failure.message
            return "fail", describe_exception(failure)

        if not case.assertion_count:
            return "fail", NO_ASSERTIONS_MESSAGE

        return "pass", f"{case.assertion_count} assertion(s) passed."

    @contextmanager
    def _capture_coverage(self, capture: CoverageCapture) -> Iterator[None]:
        if not self.enable_coverage:
            yield
            return

        if self.coverage is None:
            raise CoverageUnavailableError(
                "You've enabled code coverage but no coverage provider is available."
            )

        with self.coverage.capture() as holder:
            yield
        capture.raw = holder.raw

    def _link(self, case: TestCase, name: str) -> str | None:
        if self.link_base_uri is None:
            return None
        return build_symbol_link(self.link_base_uri, case.namespace, name)
