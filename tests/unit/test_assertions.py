"""Tests for assertion primitives."""

import math
from typing import Any

import pytest

from unit_engine.assertions import Assertions, strictly_equal
from unit_engine.signals import TestControlSignal, TestSkipped, TestTerminated


@pytest.fixture
def assertions() -> Assertions:
    """Create a fresh assertion tracker."""
    return Assertions()


class TestAssertTrue:
    """Tests for assert_true and assert_false."""

    def test_true_counts_assertion(self, assertions: Assertions) -> None:
        """Counts a successful assertion."""
        assertions.assert_true(True)
        assertions.assert_false(False)

        assert assertions.assertion_count == 2

    @pytest.mark.parametrize("value", [1, "yes", [0], object()])
    def test_truthy_values_are_not_true(
        self, assertions: Assertions, value: Any
    ) -> None:
        """Rejects truthy values that are not the boolean True."""
        with pytest.raises(TestTerminated, match="expected 'True'"):
            assertions.assert_true(value)

        assert assertions.assertion_count == 0

    @pytest.mark.parametrize("value", [0, "", None, []])
    def test_falsy_values_are_not_false(
        self, assertions: Assertions, value: Any
    ) -> None:
        """Rejects falsy values that are not the boolean False."""
        with pytest.raises(TestTerminated, match="expected 'False'"):
            assertions.assert_false(value)

    def test_failure_message_includes_actual_value_and_message(
        self, assertions: Assertions
    ) -> None:
        """Reports the caller location, the message and the actual value."""
        with pytest.raises(TestTerminated) as exc_info:
            assertions.assert_true("nope", "flag should be set")

        message = exc_info.value.message
        assert "(at test_assertions.py:" in message
        assert ": flag should be set\n\nACTUAL VALUE\n'nope'" in message


class TestAssertEqual:
    """Tests for assert_equal."""

    @pytest.mark.parametrize(
        "value",
        [1, "1", None, 1.5, math.nan, [1, {"a": (2, 3)}], {"b": 1, "a": 2}, object()],
    )
    def test_value_equals_itself(self, assertions: Assertions, value: Any) -> None:
        """Never fails when comparing a value with itself."""
        assertions.assert_equal(value, value)

        assert assertions.assertion_count == 1

    @pytest.mark.parametrize(
        ("expected", "actual"),
        [
            (1, "1"),
            (1, True),
            (1, 1.0),
            ([1], [True]),
            ({"a": 1, "b": 2}, {"b": 2, "a": 1}),
            ((1, 2), [1, 2]),
        ],
    )
    def test_type_sensitive(
        self, assertions: Assertions, expected: Any, actual: Any
    ) -> None:
        """Fails when values only match after coercion or reordering."""
        with pytest.raises(TestTerminated):
            assertions.assert_equal(expected, actual)

        assert assertions.assertion_count == 0

    def test_equal_copies_pass(self, assertions: Assertions) -> None:
        """Passes for distinct but strictly equal containers."""
        assertions.assert_equal({"a": [1, 2]}, {"a": [1, 2]})

        assert assertions.assertion_count == 1

    def test_single_line_failure_message(self, assertions: Assertions) -> None:
        """Renders expected and actual values side by side."""
        with pytest.raises(TestTerminated) as exc_info:
            assertions.assert_equal(1, "1", "ids differ")

        message = exc_info.value.message
        assert message.startswith(
            "Assertion failed, expected values to be equal (at test_assertions.py:"
        )
        assert message.endswith("): ids differ\nExpected: 1\n  Actual: '1'")

    def test_multi_line_failure_renders_diff(self, assertions: Assertions) -> None:
        """Renders a unified diff when a value spans multiple lines."""
        expected = {f"key{i}": "x" * 10 for i in range(10)}
        actual = dict(expected, key5="y" * 10)

        with pytest.raises(TestTerminated) as exc_info:
            assertions.assert_equal(expected, actual)

        message = exc_info.value.message
        assert "Expected vs Actual Output Diff" in message
        assert "--- expected" in message
        assert "+++ actual" in message
        assert "- 'key5': 'xxxxxxxxxx'," in message
        assert "+ 'key5': 'yyyyyyyyyy'," in message
        assert "Expected: " not in message


class TestUnconditionalOutcomes:
    """Tests for assert_failure and assert_skipped."""

    def test_failure_raises_terminated(self, assertions: Assertions) -> None:
        """Raises the terminated signal with the given message."""
        with pytest.raises(TestTerminated) as exc_info:
            assertions.assert_failure("broken")

        assert exc_info.value.status == "fail"
        assert exc_info.value.message == "broken"

    def test_skipped_raises_skipped(self, assertions: Assertions) -> None:
        """Raises the skipped signal with the given message."""
        with pytest.raises(TestSkipped) as exc_info:
            assertions.assert_skipped("not on this platform")

        assert exc_info.value.status == "skip"
        assert exc_info.value.message == "not on this platform"

    def test_signals_escape_broad_exception_handlers(
        self, assertions: Assertions
    ) -> None:
        """Control signals are not caught by ``except Exception``."""
        with pytest.raises(TestControlSignal):
            try:
                assertions.assert_failure("stop")
            except Exception:  # pragma: no cover
                pytest.fail("signal was swallowed")


def test_reset_assertions(assertions: Assertions) -> None:
    """Zeroes the assertion counter."""
    assertions.assert_true(True)

    assertions.reset_assertions()

    assert assertions.assertion_count == 0


def test_strictly_equal_compares_nested_types() -> None:
    """Compares nested values without coercion."""
    assert strictly_equal({"a": [1, (2,)]}, {"a": [1, (2,)]})
    assert not strictly_equal({"a": [1, (2,)]}, {"a": [1, [2]]})
    assert strictly_equal({1, 2.5}, {2.5, 1})
    assert not strictly_equal({1}, {True})
    assert not strictly_equal(frozenset({1.0}), frozenset({1}))
    assert not strictly_equal([{1}], [{True}])


def test_assert_equal_rejects_coerced_set_members(assertions: Assertions) -> None:
    """Fails when set members only match after numeric coercion."""
    with pytest.raises(TestTerminated):
        assertions.assert_equal({1}, {True})
