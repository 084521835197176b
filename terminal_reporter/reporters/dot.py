"""Reporter printing a single character per finished attempt."""

from terminal_reporter.models.config import FullResult, ReporterConfig
from terminal_reporter.models.result import TestResult
from terminal_reporter.models.test_case import Suite, TestCase
from terminal_reporter.reporters.base import BaseReporter

LINE_LENGTH = 80


class DotReporter(BaseReporter):
    """Compact progress, followed by the full epilogue."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._counter = 0

    def on_begin(self, config: ReporterConfig, suite: Suite) -> None:
        super().on_begin(config, suite)
        self.print(self.generate_starting_message())
        self.print()

    def on_test_end(self, test: TestCase, result: TestResult) -> None:
        super().on_test_end(test, result)
        if self._counter == LINE_LENGTH:
            self.stream.write("\n")
            self._counter = 0
        self._counter += 1
        self.stream.write(self._mark(test, result))

    def _mark(self, test: TestCase, result: TestResult) -> str:
        colors = self.colors
        if result.status == "skipped":
            return colors.yellow("°")
        if self.will_retry(test):
            return colors.gray("×")
        outcome = test.outcome()
        if outcome == "expected":
            return colors.green("·")
        if outcome == "flaky":
            return colors.yellow("±")
        return colors.red("T" if result.status == "timedOut" else "F")

    async def on_end(self, result: FullResult) -> None:
        await super().on_end(result)
        self.stream.write("\n")
        self.epilogue(full=True)
