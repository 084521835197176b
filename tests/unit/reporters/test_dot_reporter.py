"""Tests for the dot reporter."""

import io

import pytest

from terminal_reporter.colors import NO_COLORS
from terminal_reporter.models.config import FullResult, ReporterConfig
from terminal_reporter.models.result import PlainError
from terminal_reporter.models.test_case import Suite
from terminal_reporter.reporters.dot import LINE_LENGTH, DotReporter
from terminal_reporter.testing.factories import (
    TestResultFactory,
    add_test,
    build_file_suite,
    root_of,
)

SPEC_FILE = "/work/tests/example.spec.ts"
CONFIG = ReporterConfig(root_dir="/work")


@pytest.fixture
def suite() -> Suite:
    """Empty file suite."""
    return build_file_suite("tests/example.spec.ts")


@pytest.fixture
def reporter() -> DotReporter:
    """Dot reporter writing into a buffer."""
    return DotReporter(stream=io.StringIO(), colors=NO_COLORS, environ={})


def run_attempts(
    reporter: DotReporter, suite: Suite, statuses: tuple[str, ...], retries: int = 0
) -> str:
    """Feed attempts of one test and return the marks printed for them."""
    test = add_test(suite, "t", file=SPEC_FILE, retries=retries)
    reporter.on_begin(CONFIG, root_of(suite))
    start = len(reporter.stream.getvalue())
    for retry, status in enumerate(statuses):
        result = TestResultFactory.build(status=status, retry=retry)
        test.results.append(result)
        reporter.on_test_end(test, result)
    return reporter.stream.getvalue()[start:]


@pytest.mark.parametrize(
    ("statuses", "retries", "marks"),
    [
        (("passed",), 0, "·"),
        (("skipped",), 0, "°"),
        (("failed",), 0, "F"),
        (("timedOut",), 0, "T"),
        (("failed", "passed"), 1, "×±"),
        (("failed", "timedOut"), 1, "×T"),
    ],
)
def test_marks(
    reporter: DotReporter,
    suite: Suite,
    statuses: tuple[str, ...],
    retries: int,
    marks: str,
) -> None:
    """Each attempt prints one character describing how it went."""
    assert run_attempts(reporter, suite, statuses, retries) == marks


def test_wraps_after_line_length(reporter: DotReporter, suite: Suite) -> None:
    """Starts a new line every LINE_LENGTH marks."""
    tests = [add_test(suite, f"t{i}", file=SPEC_FILE) for i in range(LINE_LENGTH + 1)]
    reporter.on_begin(CONFIG, root_of(suite))
    start = len(reporter.stream.getvalue())

    for test in tests:
        result = TestResultFactory.build(status="passed")
        test.results.append(result)
        reporter.on_test_end(test, result)

    assert reporter.stream.getvalue()[start:] == "·" * LINE_LENGTH + "\n·"


async def test_on_end_prints_full_epilogue(
    reporter: DotReporter, suite: Suite
) -> None:
    """Failures are listed in detail after the marks."""
    test = add_test(suite, "fails", file=SPEC_FILE)
    reporter.on_begin(CONFIG, root_of(suite))
    result = TestResultFactory.build(
        status="failed", error=PlainError(message="expected 1 to be 2")
    )
    test.results.append(result)
    reporter.on_test_end(test, result)

    await reporter.on_end(FullResult(status="failed"))

    output = reporter.stream.getvalue()
    assert "F\n\n  1) tests/example.spec.ts:3:5 › fails" in output
    assert "    expected 1 to be 2" in output
    assert "\n  1 failed\n" in output
