"""Reporter printing one progress line per finished test."""

from terminal_reporter.ansi import fit_to_screen
from terminal_reporter.formatting import format_test_title
from terminal_reporter.models.config import FullResult, ReporterConfig
from terminal_reporter.models.result import TestResult
from terminal_reporter.models.test_case import Suite, TestCase
from terminal_reporter.reporters.base import BaseReporter


class LineReporter(BaseReporter):
    """Prints progress as it happens and failures as soon as they are final."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._finished = 0
        self._failures = 0

    def on_begin(self, config: ReporterConfig, suite: Suite) -> None:
        super().on_begin(config, suite)
        self.print(self.generate_starting_message())
        self.print()

    def on_test_end(self, test: TestCase, result: TestResult) -> None:
        super().on_test_end(test, result)
        self._finished += 1
        title = format_test_title(self.config, test)
        line = f"[{self._finished}/{self.total_test_count}] {title}"
        width = self.tty_width()
        self.print(fit_to_screen(line, width) if width else line)

        if self.will_retry(test) or test.outcome() not in {"unexpected", "flaky"}:
            return
        self._failures += 1
        self.print(self.format_failure(test, index=self._failures).message)

    async def on_end(self, result: FullResult) -> None:
        await super().on_end(result)
        self.epilogue(full=False)
