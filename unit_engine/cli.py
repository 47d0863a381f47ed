"""CLI entry point for the unit test engine."""

import argparse
import importlib
import json
import logging
import sys
from collections.abc import Sequence
from contextlib import ExitStack
from pathlib import Path
from typing import Any

from unit_engine.case import TestCase
from unit_engine.driver import TestCaseDriver
from unit_engine.models.config import EngineConfig
from unit_engine.models.result import TestResult
from unit_engine.orchestrator import CaseResult, run_test_cases
from unit_engine.providers.loading import load_coverage_manifest
from unit_engine.signals import FatalTestError

log = logging.getLogger("unit_engine")


def load_test_case(target: str) -> TestCase:
    """Instantiate a test case from a ``module:Class`` reference."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise ValueError(f"Expected 'module:Class', got '{target}'")

    case_cls = getattr(importlib.import_module(module_name), class_name)
    if not (isinstance(case_cls, type) and issubclass(case_cls, TestCase)):
        raise TypeError(f"'{target}' is not a TestCase subclass")
    return case_cls()


def log_result(result: TestResult) -> None:
    """Log a result as soon as it is produced."""
    log.info(
        "Test completed: %s.%s status=%s duration=%.3fs",
        result.namespace,
        result.name,
        result.status,
        result.duration,
    )


def run(targets: Sequence[str], config: EngineConfig) -> int:
    """Run the referenced test cases and return exit code."""
    test_cases = [load_test_case(target) for target in targets]

    with ExitStack() as stack:
        coverage = None
        if config.enable_coverage:
            log.info("Loading coverage provider: %s", config.coverage_provider)
            manifest = load_coverage_manifest(config.coverage_provider)
            provider_config = manifest.config_cls(**config.coverage_config)
            coverage = stack.enter_context(manifest.provider_factory(provider_config))

        driver = TestCaseDriver.from_config(
            config, coverage=coverage, observer=log_result
        )
        case_results = run_test_cases(driver, test_cases)

    print(json.dumps(format_output(case_results), indent=2))

    has_failures = any(
        result.status in {"fail", "error"}
        for case_result in case_results
        for result in case_result.results
    )

    return 1 if has_failures else 0


def format_output(case_results: Sequence[CaseResult]) -> dict[str, Any]:
    """Format case results for JSON output."""
    all_results: list[dict[str, Any]] = [
        {
            "namespace": result.namespace,
            "name": result.name,
            "status": result.status,
            "duration": result.duration,
            "message": result.message,
            "coverage": dict(result.coverage),
            "link": result.link,
        }
        for case_result in case_results
        for result in case_result.results
    ]

    return {
        "total": len(all_results),
        "passed": sum(1 for r in all_results if r["status"] == "pass"),
        "failed": sum(1 for r in all_results if r["status"] == "fail"),
        "skipped": sum(1 for r in all_results if r["status"] == "skip"),
        "errors": sum(1 for r in all_results if r["status"] == "error"),
        "results": all_results,
    }


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run unit test cases")
    parser.add_argument(
        "--case",
        dest="cases",
        action="append",
        required=True,
        help="Test case to run as module:Class (repeatable)",
    )
    parser.add_argument(
        "--coverage",
        action="store_true",
        help="Capture line coverage for every test method",
    )
    parser.add_argument(
        "--coverage-provider",
        default="coveragepy",
        help="Coverage provider key",
    )
    parser.add_argument(
        "--coverage-config",
        default="{}",
        help="JSON configuration for the coverage provider",
    )
    parser.add_argument(
        "--path",
        dest="paths",
        action="append",
        help="Only report coverage for this path (repeatable)",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        help="Project root; coverage paths are reported relative to it",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the test order, to replay a previous run",
    )
    parser.add_argument(
        "--link-base-uri",
        help="Base URI of the code browser used for result links",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = EngineConfig(
        enable_coverage=args.coverage,
        coverage_provider=args.coverage_provider,
        coverage_config=json.loads(args.coverage_config),
        paths=args.paths,
        project_root=args.project_root,
        seed=args.seed,
        link_base_uri=args.link_base_uri,
    )

    try:
        exit_code = run(args.cases, config)
    except FatalTestError as exc:
        log.error("%s", exc)
        exit_code = 2

    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
