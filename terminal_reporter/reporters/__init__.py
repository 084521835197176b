"""Terminal reporters."""

from terminal_reporter.reporters.base import BaseReporter
from terminal_reporter.reporters.dot import DotReporter
from terminal_reporter.reporters.line import LineReporter

__all__ = ["BaseReporter", "DotReporter", "LineReporter"]
