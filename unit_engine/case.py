"""Base class for test cases run by the engine."""

import inspect
from collections.abc import Callable, Hashable, Mapping, Sequence
from types import MappingProxyType, MethodType
from typing import Any, ClassVar

from unit_engine.assertions import Assertions
from unit_engine.signals import TestControlSignal, TestDeclarationError

TEST_PREFIX = "test"


class TestCase(Assertions):
    """A collection of related test methods sharing setup and teardown.

    Every function whose name starts with ``test`` is registered when the
    subclass is created. Run instances with :class:`~unit_engine.driver.TestCaseDriver`.

    Example:
        class FruitTests(TestCase):
            def test_apple(self):
                self.assert_true(is_fruit("apple"))

    """

    __test__ = False

    _test_registry: ClassVar[Mapping[str, Callable[..., Any]]] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        registry: dict[str, Callable[..., Any]] = {}
        for klass in reversed(cls.__mro__):
            for name, member in vars(klass).items():
                if not name.startswith(TEST_PREFIX):
                    continue
                if inspect.isfunction(member):
                    registry[name] = member
                else:
                    # A non-function attribute shadows an inherited test.
                    registry.pop(name, None)
        cls._test_registry = MappingProxyType(registry)

    @property
    def namespace(self) -> str:
        """Qualified class name identifying this case in results."""
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def get_test_names(cls) -> Sequence[str]:
        """Return the registered test method names in declaration order."""
        return tuple(cls._test_registry)

    def get_test_method(self, name: str) -> Callable[[], Any]:
        """Return the registered test method ``name`` bound to this case."""
        return MethodType(self._test_registry[name], self)

    # Hooks for setup and teardown

    def will_run_tests(self) -> None:
        """Run once, before any test in this case."""

    def did_run_tests(self) -> None:
        """Run once, after every test in this case."""

    def will_run_one_test(self, name: str) -> None:
        """Run before each test method."""

    def did_run_one_test(self, name: str) -> None:
        """Run after each test method, even when it failed."""

    def will_run_test_cases(self, test_cases: Sequence["TestCase"]) -> None:
        """Run once before any of ``test_cases`` execute."""

    def did_run_test_cases(self, test_cases: Sequence["TestCase"]) -> None:
        """Run once after all of ``test_cases`` executed."""

    # Exception handling

    def assert_exception(
        self,
        exception_class: type[BaseException],
        func: Callable[[], Any],
    ) -> None:
        """Assert that calling ``func`` raises ``exception_class``."""
        self.try_test_cases(
            {"assert_exception": None},
            [False],
            lambda _: func(),
            exception_class,
        )

    def try_test_cases(
        self,
        inputs: Mapping[Any, Any],
        expect: Sequence[bool],
        func: Callable[[Any], Any],
        exception_class: type[BaseException] = Exception,
    ) -> None:
        """Check which inputs make ``func`` raise.

        Args:
            inputs: Labels mapped to the input passed to ``func``
            expect: One entry per input, True when ``func`` should return
                normally and False when it should raise ``exception_class``
            func: Callable invoked once per input
            exception_class: Exception type counted as "raised"; anything
                else propagates

        Raises:
            TestDeclarationError: If inputs and expectations differ in length

        """
        if len(inputs) != len(expect):
            raise TestDeclarationError(
                "Input and expectations must have the same number of values."
            )

        for (label, value), expected in zip(inputs.items(), expect, strict=True):
            caught: BaseException | None = None
            try:
                func(value)
            except exception_class as exc:
                if isinstance(exc, TestControlSignal):
                    raise
                caught = exc

            actual = caught is None

            if expected is actual:
                if expected:
                    message = f"Test case '{label}' did not throw, as expected."
                else:
                    message = f"Test case '{label}' threw, as expected."
            elif expected:
                message = (
                    f"Test case '{label}' was expected to succeed, but it raised "
                    f"an exception of class {type(caught).__name__} with "
                    f"message: {caught}"
                )
            else:
                message = (
                    f"Test case '{label}' was expected to raise an exception, "
                    "but it did not throw anything."
                )

            self.assert_equal(expected, actual, message)

    def try_test_case_map(
        self,
        cases: Mapping[Hashable, bool],
        func: Callable[[Any], Any],
        exception_class: type[BaseException] = Exception,
    ) -> None:
        """Like :meth:`try_test_cases` for scalar inputs used as their own labels."""
        self.try_test_cases(
            {key: key for key in cases},
            list(cases.values()),
            func,
            exception_class,
        )
