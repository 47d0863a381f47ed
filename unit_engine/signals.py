"""Control signals and fatal errors raised while running test methods."""

import traceback
from typing import Literal

SignalStatus = Literal["fail", "skip"]


class TestControlSignal(BaseException):
    """Unwinds out of a test method after its outcome has been recorded.

    Derives from BaseException so that ``except Exception`` blocks in test
    code do not intercept it.
    """

    __test__ = False

    status: SignalStatus

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TestTerminated(TestControlSignal):
    """An assertion failed; stop this test method and move on."""

    status = "fail"


class TestSkipped(TestControlSignal):
    """The test method asked to be skipped."""

    status = "skip"


class MultipleTestErrors(BaseExceptionGroup):
    """Both a test body and its teardown hook raised."""


class FatalTestError(Exception):
    """Raised for problems that abort the whole run instead of one test."""


class CoverageUnavailableError(FatalTestError):
    """Raised when coverage is enabled but no provider can capture it."""


class TestDeclarationError(FatalTestError):
    """Raised when a table-driven test is declared inconsistently."""

    __test__ = False


def describe_exception(exc: BaseException) -> str:
    """Render an exception's type, message and traceback for a result."""
    trace = "".join(traceback.format_exception(exc)).rstrip()
    return f"EXCEPTION ({type(exc).__name__}): {exc}\n{trace}"
