"""Runs several test cases with one driver."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from unit_engine.case import TestCase
from unit_engine.driver import TestCaseDriver
from unit_engine.models.result import TestResult
from unit_engine.signals import FatalTestError, describe_exception

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class CaseResult:
    """Result container for one test case."""

    namespace: str
    results: Sequence[TestResult]


def run_test_cases(
    driver: TestCaseDriver, test_cases: Sequence[TestCase]
) -> Sequence[CaseResult]:
    """Run each test case in turn, bracketed by the suite-level hooks.

    A test case whose run fails outright is reported as a single error
    result; the remaining cases still run.

    Raises:
        FatalTestError: If the run cannot continue

    """
    if not test_cases:
        log.info("No test cases provided")
        return []

    log.info("Running %d test case(s)...", len(test_cases))
    driver.will_run_test_cases(test_cases)

    case_results: list[CaseResult] = []
    for case in test_cases:
        try:
            results = driver.run(case)
        except FatalTestError:
            raise
        except Exception as exc:
            log.error("Test case %s failed: %s", case.namespace, exc, exc_info=exc)
            results = [
                TestResult(
                    namespace=case.namespace,
                    name=type(case).__name__,
                    status="error",
                    duration=0.0,
                    message=describe_exception(exc),
                )
            ]
        case_results.append(CaseResult(namespace=case.namespace, results=results))

    driver.did_run_test_cases(test_cases)
    log.info("Test execution completed")

    return case_results
