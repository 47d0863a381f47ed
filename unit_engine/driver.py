"""Test case driver: discovers, orders and runs test methods."""

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from unit_engine.case import TestCase
from unit_engine.models.config import EngineConfig
from unit_engine.models.result import TestResult
from unit_engine.providers.base import CoverageProvider
from unit_engine.runner import TestMethodRunner
from unit_engine.signals import (
    FatalTestError,
    TestControlSignal,
    describe_exception,
)

log = logging.getLogger(__name__)

ResultObserver = Callable[[TestResult], None]

# Name of the extra result reported when class-level teardown fails
TEARDOWN_NAME = "did_run_tests"


@dataclass(frozen=True, kw_only=True)
class TestCaseDriver:
    """Runs every test method of a test case in randomized order."""

    __test__ = False

    runner: TestMethodRunner
    seed: int | None = None
    observer: ResultObserver | None = None

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        coverage: CoverageProvider | None = None,
        observer: ResultObserver | None = None,
    ) -> "TestCaseDriver":
        """Create a driver from engine configuration.

        Args:
            config: Engine configuration
            coverage: Coverage provider, required when coverage is enabled
            observer: Called with each result as soon as it is produced

        """
        runner = TestMethodRunner(
            coverage=coverage,
            enable_coverage=config.enable_coverage,
            project_root=config.project_root,
            paths=config.paths,
            link_base_uri=config.link_base_uri,
        )
        return cls(runner=runner, seed=config.seed, observer=observer)

    def run(self, case: TestCase) -> Sequence[TestResult]:
        """Run all test methods of ``case``.

        Tests run in a shuffled order so that tests which depend on the
        order of execution fail instead of passing by accident.

        Args:
            case: The test case to run

        Returns:
            One result per test method, in the order they ran, followed by
            an extra result when the class-level teardown hook fails

        Raises:
            FatalTestError: If the run cannot continue

        """
        names = list(case.get_test_names())
        seed = self.seed if self.seed is not None else random.randrange(2**32)
        random.Random(seed).shuffle(names)

        log.info(
            "Running %d test(s) from %s (seed=%d)", len(names), case.namespace, seed
        )

        results: list[TestResult] = []

        try:
            case.will_run_tests()
        except FatalTestError:
            raise
        except TestControlSignal as signal:
            for name in names:
                self._record(
                    results,
                    self.runner.unexecuted_result(
                        case, name, signal.status, signal.message
                    ),
                )
        except Exception as exc:
            log.error("Setup of %s failed: %s", case.namespace, exc, exc_info=exc)
            message = describe_exception(exc)
            for name in names:
                self._record(
                    results, self.runner.unexecuted_result(case, name, "error", message)
                )
        else:
            for name in names:
                self._record(results, self.runner.run_test(case, name))

        try:
            case.did_run_tests()
        except FatalTestError:
            raise
        except TestControlSignal as signal:
            self._record(
                results,
                self.runner.unexecuted_result(
                    case, TEARDOWN_NAME, signal.status, signal.message
                ),
            )
        except Exception as exc:
            log.error("Teardown of %s failed: %s", case.namespace, exc, exc_info=exc)
            self._record(
                results,
                self.runner.unexecuted_result(
                    case, TEARDOWN_NAME, "error", describe_exception(exc)
                ),
            )

        return results

    def will_run_test_cases(self, test_cases: Sequence[TestCase]) -> None:
        """Give each test case a chance to prepare for the whole suite."""
        for case in test_cases:
            case.will_run_test_cases(test_cases)

    def did_run_test_cases(self, test_cases: Sequence[TestCase]) -> None:
        """Notify each test case that the whole suite has run."""
        for case in test_cases:
            case.did_run_test_cases(test_cases)

    def _record(self, results: list[TestResult], result: TestResult) -> None:
        results.append(result)
        if self.observer is not None:
            self.observer(result)
