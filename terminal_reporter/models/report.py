"""Intermediate values produced while rendering a report."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from terminal_reporter.models.result import Location
from terminal_reporter.models.test_case import TestCase


@dataclass(frozen=True, kw_only=True)
class ErrorDetails:
    """Rendered error and the source location it points at."""

    message: str
    location: Location | None = None


@dataclass(frozen=True, kw_only=True)
class FailureDetails:
    """Rendered lines for one attempt."""

    tokens: Sequence[str]
    location: Location | None = None


@dataclass(frozen=True, kw_only=True)
class Annotation:
    """Rendered attempt tagged with the location of its failure."""

    title: str
    message: str
    location: Location | None = None


@dataclass(frozen=True, kw_only=True)
class FormattedFailure:
    """Full failure block for a test and one annotation per reported attempt."""

    message: str
    annotations: Sequence[Annotation] = field(default_factory=tuple)


@dataclass(frozen=True, kw_only=True)
class TestSummary:
    """Tests of a run grouped by outcome."""

    __test__ = False

    skipped: int
    expected: int
    skipped_with_error: Sequence[TestCase]
    unexpected: Sequence[TestCase]
    flaky: Sequence[TestCase]
    failures_to_print: Sequence[TestCase]
