"""Test factories for building suite trees and attempts."""

from collections.abc import Sequence

from polyfactory.factories import DataclassFactory

from terminal_reporter.models.result import Attachment, Location, TestResult
from terminal_reporter.models.test_case import Suite, TestCase


class LocationFactory(DataclassFactory[Location]):
    """Factory for Location."""

    __model__ = Location

    file = "/work/tests/example.spec.ts"


class AttachmentFactory(DataclassFactory[Attachment]):
    """Factory for Attachment."""

    __model__ = Attachment

    content_type = "text/plain"
    path = None


class TestResultFactory(DataclassFactory[TestResult]):
    """Factory for TestResult."""

    __model__ = TestResult

    status = "passed"
    retry = 0
    duration = 100.0
    error = None
    attachments = ()


def build_file_suite(file_title: str, project_name: str = "") -> Suite:
    """Create root, project and file suites and return the file suite."""
    root = Suite(title="")
    project = Suite(title=project_name, parent=root)
    root.suites.append(project)
    file_suite = Suite(title=file_title, parent=project)
    project.suites.append(file_suite)
    return file_suite


def root_of(suite: Suite) -> Suite:
    """Walk up to the root suite."""
    while suite.parent is not None:
        suite = suite.parent
    return suite


def add_test(
    suite: Suite,
    title: str,
    *,
    file: str,
    line: int = 3,
    column: int = 5,
    results: Sequence[TestResult] = (),
    **kwargs,
) -> TestCase:
    """Declare a test in ``suite`` with the given attempts."""
    test = TestCase(
        title=title,
        location=Location(file=file, line=line, column=column),
        parent=suite,
        results=list(results),
        **kwargs,
    )
    suite.tests.append(test)
    return test
