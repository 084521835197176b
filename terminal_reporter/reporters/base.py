"""Base reporter collecting run events and printing the end-of-run report."""

import logging
import os
import shutil
import sys
import time
from collections.abc import Mapping, Sequence
from typing import TextIO

from terminal_reporter.colors import Colors
from terminal_reporter.formatting import (
    format_duration,
    format_error,
    format_failure,
    format_number,
    format_test_header,
    relative_test_path,
)
from terminal_reporter.models.config import FullResult, ReporterConfig
from terminal_reporter.models.report import FormattedFailure, TestSummary
from terminal_reporter.models.result import TestError, TestOutput, TestResult
from terminal_reporter.models.test_case import Suite, TestCase
from terminal_reporter.stack import DEFAULT_FRAME_PARSER, FrameParser

log = logging.getLogger(__name__)

SKIP_TEST_OUTPUT_ENV = "TERMINAL_REPORTER_SKIP_TEST_OUTPUT"
TTY_WIDTH_ENV = "TERMINAL_REPORTER_TTY_WIDTH"

SLOW_TESTS_HINT = "  Consider splitting slow test files to speed up parallel execution"


class BaseReporter:
    """Receives lifecycle events from the execution engine and reports on them.

    Subclasses decide what to print while the run is in progress; the base
    class keeps the bookkeeping (captured output, file durations, timing) and
    renders the epilogue: failures, slow files and the summary.
    """

    config: ReporterConfig
    suite: Suite
    result: FullResult

    def __init__(
        self,
        *,
        omit_failures: bool = False,
        stream: TextIO | None = None,
        colors: Colors | None = None,
        environ: Mapping[str, str] | None = None,
        frame_parser: FrameParser = DEFAULT_FRAME_PARSER,
    ) -> None:
        env = os.environ if environ is None else environ
        self.stream = stream if stream is not None else sys.stdout
        if colors is None:
            colors = Colors.for_stream(self.stream, env)
        self.colors = colors
        self.frame_parser = frame_parser
        self.duration = 0.0
        self.total_test_count = 0
        self.file_durations: dict[str, float] = {}
        self._output: dict[TestResult, list[TestOutput]] = {}
        self._monotonic_start_time = 0.0
        self._omit_failures = omit_failures
        self._print_test_output = not env.get(SKIP_TEST_OUTPUT_ENV)
        self._tty_width_for_test = _parse_width(env.get(TTY_WIDTH_ENV))

    def on_begin(self, config: ReporterConfig, suite: Suite) -> None:
        self._monotonic_start_time = time.monotonic()
        self.config = config
        self.suite = suite
        self.total_test_count = len(suite.all_tests())
        log.info("Reporting on %d test(s)", self.total_test_count)

    def on_stdout(
        self,
        chunk: bytes | str,
        test: TestCase | None = None,
        result: TestResult | None = None,
    ) -> None:
        self._append_output(TestOutput(chunk=chunk, stream="stdout"), result)

    def on_stderr(
        self,
        chunk: bytes | str,
        test: TestCase | None = None,
        result: TestResult | None = None,
    ) -> None:
        self._append_output(TestOutput(chunk=chunk, stream="stderr"), result)

    def _append_output(self, output: TestOutput, result: TestResult | None) -> None:
        if result is None:
            return
        self._output.setdefault(result, []).append(output)

    def output_for(self, result: TestResult) -> Sequence[TestOutput]:
        """Output captured so far for an attempt, in arrival order."""
        return self._output.get(result, ())

    def on_test_end(self, test: TestCase, result: TestResult) -> None:
        project_name = test.title_path()[1]
        relative_path = relative_test_path(self.config, test)
        file_and_project = (
            f"[{project_name}] › {relative_path}" if project_name else relative_path
        )
        duration = self.file_durations.get(file_and_project, 0)
        self.file_durations[file_and_project] = duration + result.duration

    def on_error(self, error: TestError) -> None:
        details = format_error(
            self.config,
            error,
            self.colors.enabled,
            colors=self.colors,
            parser=self.frame_parser,
        )
        self.print(details.message)

    async def on_end(self, result: FullResult) -> None:
        self.duration = (time.monotonic() - self._monotonic_start_time) * 1000
        self.result = result
        log.info(
            "Run finished with status=%s after %s",
            result.status,
            format_duration(self.duration),
        )

    def print(self, text: str = "") -> None:
        """Write a line to the report stream."""
        print(text, file=self.stream)

    def tty_width(self) -> int:
        if self._tty_width_for_test:
            return self._tty_width_for_test
        if not self._print_test_output:
            return 80
        return shutil.get_terminal_size(fallback=(0, 0)).columns

    def generate_starting_message(self) -> str:
        jobs = self.config.workers
        if self.config.test_groups_count is not None:
            jobs = min(jobs, self.config.test_groups_count)
        shard = self.config.shard
        shard_details = f", shard {shard.current} of {shard.total}" if shard else ""
        tests = "test" if self.total_test_count == 1 else "tests"
        workers = "worker" if jobs == 1 else "workers"
        return (
            f"\nRunning {self.total_test_count} {tests} "
            f"using {jobs} {workers}{shard_details}"
        )

    def get_slow_tests(self) -> Sequence[tuple[str, float]]:
        """Files whose tests took longer than the threshold, slowest first."""
        slow_tests = self.config.report_slow_tests
        if slow_tests is None:
            return []
        file_durations = sorted(
            self.file_durations.items(), key=lambda entry: entry[1], reverse=True
        )
        slow = [entry for entry in file_durations if entry[1] > slow_tests.threshold]
        return slow[: slow_tests.max] if slow_tests.max else slow

    def generate_summary_message(self, summary: TestSummary) -> str:
        colors = self.colors
        tokens: list[str] = []
        if summary.unexpected:
            tokens.append(colors.red(f"  {len(summary.unexpected)} failed"))
            for test in summary.unexpected:
                header = format_test_header(self.config, test, "    ", colors=colors)
                tokens.append(colors.red(header))
        if summary.flaky:
            tokens.append(colors.yellow(f"  {len(summary.flaky)} flaky"))
            for test in summary.flaky:
                header = format_test_header(self.config, test, "    ", colors=colors)
                tokens.append(colors.yellow(header))
        if summary.skipped:
            tokens.append(colors.yellow(f"  {summary.skipped} skipped"))
        if summary.expected:
            tokens.append(
                colors.green(f"  {summary.expected} passed")
                + colors.dim(f" ({format_duration(self.duration)})")
            )
        if self.result.status == "timedout":
            seconds = format_number(self.config.global_timeout / 1000)
            tokens.append(
                colors.red(f"  Timed out waiting {seconds}s for the entire test run")
            )
        return "\n".join(tokens)

    def generate_summary(self) -> TestSummary:
        """Classify every test of the run by its outcome."""
        skipped = 0
        expected = 0
        skipped_with_error: list[TestCase] = []
        unexpected: list[TestCase] = []
        flaky: list[TestCase] = []

        for test in self.suite.all_tests():
            outcome = test.outcome()
            if outcome == "skipped":
                skipped += 1
                if any(result.error is not None for result in test.results):
                    skipped_with_error.append(test)
            elif outcome == "expected":
                expected += 1
            elif outcome == "unexpected":
                unexpected.append(test)
            elif outcome == "flaky":
                flaky.append(test)

        return TestSummary(
            skipped=skipped,
            expected=expected,
            skipped_with_error=skipped_with_error,
            unexpected=unexpected,
            flaky=flaky,
            failures_to_print=[*unexpected, *flaky, *skipped_with_error],
        )

    def epilogue(self, full: bool) -> None:
        """Print failures, slow test files and the summary of the run."""
        summary = self.generate_summary()
        summary_message = self.generate_summary_message(summary)
        if full and summary.failures_to_print and not self._omit_failures:
            self._print_failures(summary.failures_to_print)
        self._print_slow_tests()
        self._print_summary(summary_message)

    def _print_failures(self, failures: Sequence[TestCase]) -> None:
        self.print()
        for index, test in enumerate(failures, start=1):
            self.print(self.format_failure(test, index=index).message)

    def format_failure(
        self, test: TestCase, index: int | None = None
    ) -> FormattedFailure:
        """Render a failing test with the output captured by this reporter."""
        return format_failure(
            self.config,
            test,
            index=index,
            include_stdio=self._print_test_output,
            output=self._output,
            colors=self.colors,
            parser=self.frame_parser,
        )

    def _print_slow_tests(self) -> None:
        slow_tests = self.get_slow_tests()
        for file, duration in slow_tests:
            self.print(
                self.colors.yellow("  Slow test file: ")
                + file
                + self.colors.yellow(f" ({format_duration(duration)})")
            )
        if slow_tests:
            self.print(self.colors.yellow(SLOW_TESTS_HINT))

    def _print_summary(self, summary: str) -> None:
        if summary.strip():
            self.print()
            self.print(summary)

    def will_retry(self, test: TestCase) -> bool:
        """Whether the execution engine should run the test again."""
        return test.outcome() == "unexpected" and len(test.results) <= test.retries


def _parse_width(value: str | None) -> int:
    try:
        return int(value) if value else 0
    except ValueError:
        log.debug("Ignoring invalid terminal width %r", value)
        return 0
