"""Assertion primitives used inside test methods."""

import difflib
import inspect
import os
import pprint
from collections.abc import Mapping, Set
from typing import Any, NoReturn

from unit_engine.signals import TestSkipped, TestTerminated

_ENGINE_DIR = os.path.dirname(os.path.abspath(__file__))


def strictly_equal(expected: Any, actual: Any) -> bool:
    """Compare two values without any type coercion.

    Types must match at every level and mappings must list their keys in
    the same order. Identical objects are always equal.
    """
    if expected is actual:
        return True
    if type(expected) is not type(actual):
        return False
    if isinstance(expected, Mapping):
        if list(expected) != list(actual):
            return False
        return all(strictly_equal(expected[key], actual[key]) for key in expected)
    if isinstance(expected, Set):
        return {(type(item), item) for item in expected} == {
            (type(item), item) for item in actual
        }
    if isinstance(expected, (list, tuple)):
        return len(expected) == len(actual) and all(
            strictly_equal(left, right)
            for left, right in zip(expected, actual, strict=True)
        )
    return bool(expected == actual)


def printable_value(value: Any) -> str:
    """Render a value for a failure message."""
    return pprint.pformat(value, width=80, sort_dicts=False)


def render_difference(expected: str, actual: str) -> str:
    """Render a unified diff between two multi-line renderings."""
    diff = difflib.unified_diff(
        expected.splitlines(),
        actual.splitlines(),
        fromfile="expected",
        tofile="actual",
        lineterm="",
        n=0xFFFF,
    )
    return "\n".join(diff)


def caller_location() -> tuple[str, int]:
    """Return the file name and line of the first frame outside the engine."""
    frame = inspect.currentframe()
    while frame is not None:
        filename = os.path.abspath(frame.f_code.co_filename)
        if os.path.dirname(filename) != _ENGINE_DIR:
            return os.path.basename(filename), frame.f_lineno
        frame = frame.f_back
    return "<unknown>", 0


class Assertions:
    """Assertion methods and the per-test assertion counter.

    Every successful check increments :attr:`assertion_count`. A failed
    check raises :class:`TestTerminated` carrying the failure message, which
    ends the current test method without affecting the others.
    """

    assertion_count: int = 0

    def reset_assertions(self) -> None:
        """Zero the assertion counter before a test method runs."""
        self.assertion_count = 0

    def assert_true(self, value: Any, message: str | None = None) -> None:
        """Assert that a value is ``True``, strictly."""
        if value is True:
            self.assertion_count += 1
            return
        self._fail_with_expected_value("True", value, message)

    def assert_false(self, value: Any, message: str | None = None) -> None:
        """Assert that a value is ``False``, strictly."""
        if value is False:
            self.assertion_count += 1
            return
        self._fail_with_expected_value("False", value, message)

    def assert_equal(
        self, expected: Any, actual: Any, message: str | None = None
    ) -> None:
        """Assert that two values are equal, strictly.

        Args:
            expected: The value reasoned about ahead of time
            actual: The value produced by running the code under test
            message: What a discrepancy between the two means

        """
        if strictly_equal(expected, actual):
            self.assertion_count += 1
            return

        rendered_expected = printable_value(expected)
        rendered_actual = printable_value(actual)
        file, line = caller_location()

        output = f"Assertion failed, expected values to be equal (at {file}:{line})"
        output += f": {message}" if message is not None else "."
        output += "\n"

        if "\n" not in rendered_expected and "\n" not in rendered_actual:
            output += f"Expected: {rendered_expected}\n  Actual: {rendered_actual}"
        else:
            output += "Expected vs Actual Output Diff\n" + render_difference(
                rendered_expected, rendered_actual
            )

        raise TestTerminated(output)

    def assert_failure(self, message: str) -> NoReturn:
        """Fail the current test unconditionally."""
        raise TestTerminated(message)

    def assert_skipped(self, message: str) -> NoReturn:
        """End the current test, marking it as skipped."""
        raise TestSkipped(message)

    def _fail_with_expected_value(
        self, expected_description: str, actual: Any, message: str | None
    ) -> NoReturn:
        file, line = caller_location()
        description = (
            f"Assertion failed, expected '{expected_description}' (at {file}:{line})"
        )
        description += f": {message}" if message is not None else "."
        raise TestTerminated(
            f"{description}\n\nACTUAL VALUE\n{printable_value(actual)}"
        )
