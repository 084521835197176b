"""Render errors, attempts and whole failing tests as terminal text."""

import logging
import math
import os
import re
from collections.abc import Mapping, Sequence
from pathlib import Path

from terminal_reporter.code_frame import render_code_frame
from terminal_reporter.colors import NO_COLORS, Colors
from terminal_reporter.models.config import ReporterConfig
from terminal_reporter.models.report import (
    Annotation,
    ErrorDetails,
    FailureDetails,
    FormattedFailure,
)
from terminal_reporter.models.result import (
    Attachment,
    Location,
    OpaqueError,
    PlainError,
    StackError,
    TestError,
    TestOutput,
    TestResult,
)
from terminal_reporter.models.test_case import TestCase, TestStep
from terminal_reporter.stack import (
    DEFAULT_FRAME_PARSER,
    FrameParser,
    prepare_error_stack,
)

log = logging.getLogger(__name__)

BANNER_WIDTH = 100
ATTACHMENT_PREVIEW_LENGTH = 300

_NON_EMPTY_LINE = re.compile(r"^(?=.+$)", re.MULTILINE)

_DURATION_UNITS = (("d", 86_400_000), ("h", 3_600_000), ("m", 60_000), ("s", 1000))


def pad(line: str, char: str, colors: Colors = NO_COLORS) -> str:
    """Fill a line up to the banner width with ``char``."""
    if line:
        line += " "
    return line + colors.gray(char * max(0, BANNER_WIDTH - len(line)))


def indent(lines: str, tab: str) -> str:
    """Prefix every non-empty line with ``tab``."""
    return _NON_EMPTY_LINE.sub(tab, lines)


def relative_file_path(config: ReporterConfig, file: str) -> str:
    relative = os.path.relpath(file, config.root_dir)
    return os.path.basename(file) if relative == os.curdir else relative


def relative_test_path(config: ReporterConfig, test: TestCase) -> str:
    return relative_file_path(config, test.location.file)


def format_test_title(
    config: ReporterConfig, test: TestCase, step: TestStep | None = None
) -> str:
    """Fully qualified title: project, location, describe blocks, test, steps."""
    # root, project, file, ...describes, test
    _, project_name, _, *titles = test.title_path()
    location = (
        f"{relative_test_path(config, test)}"
        f":{test.location.line}:{test.location.column}"
    )
    project_title = f"[{project_name}] › " if project_name else ""
    step_titles = step.title_path() if step else []
    step_suffix = "".join(f" › {title}" for title in step_titles)
    return f"{project_title}{location} › {' › '.join(titles)}{step_suffix}"


def format_test_header(
    config: ReporterConfig,
    test: TestCase,
    indent: str,
    index: int | None = None,
    colors: Colors = NO_COLORS,
) -> str:
    title = format_test_title(config, test)
    header = f"{indent}{f'{index}) ' if index else ''}{title}"
    return pad(header, "=", colors)


def format_error(
    config: ReporterConfig,
    error: TestError,
    highlight_code: bool,
    file: str | None = None,
    colors: Colors = NO_COLORS,
    parser: FrameParser = DEFAULT_FRAME_PARSER,
) -> ErrorDetails:
    """Render an error, with a code frame when its stack points at a readable file.

    Args:
        config: Run configuration, used to shorten paths
        error: Error reported by the execution engine
        highlight_code: Whether to syntax highlight the code frame
        file: File already shown by the caller; its path is not repeated
        colors: Styling to apply
        parser: Resolves stack frame lines to source positions

    Returns:
        Rendered text and the location the stack points at, if any

    """
    tokens = [""]
    location: Location | None = None

    if isinstance(error, StackError) and error.stack:
        parsed = prepare_error_stack(error.stack, parser)
        tokens.append(parsed.message)
        location = parsed.location
        if location is not None:
            tokens.extend(
                _code_frame_tokens(config, location, highlight_code, file, colors)
            )
        tokens.append("")
        tokens.append(colors.dim("\n".join(parsed.stack_lines)))
    elif isinstance(error, StackError | PlainError):
        if error.message:
            tokens.append(error.message)
    elif isinstance(error, OpaqueError) and error.value:
        tokens.append(str(error.value))

    return ErrorDetails(message="\n".join(tokens), location=location)


def _code_frame_tokens(
    config: ReporterConfig,
    location: Location,
    highlight_code: bool,
    file: str | None,
    colors: Colors,
) -> Sequence[str]:
    # Stack traces may use /private/var/folders instead of /var/folders on macOS.
    source = _read_source(location.file)
    if source is None:
        return []
    real_file, text = source
    code_frame = _render_code_frame(text, location, highlight_code)
    if code_frame is None:
        return []

    tokens: list[str] = []
    if not file or file != real_file:
        tokens.append("")
        tokens.append(
            colors.gray("   at ")
            + f"{relative_file_path(config, real_file)}:{location.line}"
        )
    tokens.append("")
    tokens.append(code_frame)
    return tokens


def _read_source(file: str) -> tuple[str, str] | None:
    """Read a source file through symlinks, or None if it cannot be read."""
    try:
        real_file = os.path.realpath(file, strict=True)
        return real_file, Path(real_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Cannot read source file %s: %s", file, e)
        return None


def _render_code_frame(
    source: str, location: Location, highlight_code: bool
) -> str | None:
    try:
        return render_code_frame(source, location, highlight_code)
    except Exception:
        log.debug(
            "Cannot render code frame for %s:%d",
            location.file,
            location.line,
            exc_info=True,
        )
        return None


def format_result_failure(
    config: ReporterConfig,
    test: TestCase,
    result: TestResult,
    initial_indent: str,
    highlight_code: bool,
    colors: Colors = NO_COLORS,
    parser: FrameParser = DEFAULT_FRAME_PARSER,
) -> FailureDetails:
    """Render what went wrong in a single attempt."""
    tokens: list[str] = []
    if result.status == "timedOut":
        tokens.append("")
        timeout = f"Timeout of {format_number(test.timeout)}ms exceeded."
        tokens.append(indent(colors.red(timeout), initial_indent))
    if result.status == "passed" and test.expected_status == "failed":
        tokens.append("")
        tokens.append(
            indent(colors.red("Expected to fail, but passed."), initial_indent)
        )

    error: ErrorDetails | None = None
    if result.error is not None:
        error = format_error(
            config, result.error, highlight_code, test.location.file, colors, parser
        )
        tokens.append(indent(error.message, initial_indent))

    return FailureDetails(
        tokens=tokens, location=error.location if error is not None else None
    )


def format_failure(
    config: ReporterConfig,
    test: TestCase,
    *,
    index: int | None = None,
    include_stdio: bool = False,
    include_attachments: bool = True,
    output: Mapping[TestResult, Sequence[TestOutput]] | None = None,
    colors: Colors = NO_COLORS,
    cwd: str | None = None,
    parser: FrameParser = DEFAULT_FRAME_PARSER,
) -> FormattedFailure:
    """Render every reportable attempt of a test under a common header.

    Args:
        config: Run configuration
        test: Test to render
        index: Position of the test in the list of failures
        include_stdio: Whether to dump the output captured for each attempt
        include_attachments: Whether to list attachments of each attempt
        output: Captured output keyed by attempt
        colors: Styling to apply
        cwd: Directory attachment paths are shown relative to
        parser: Resolves stack frame lines to source positions

    Returns:
        The rendered block and one annotation per reported attempt

    """
    cwd = cwd or os.getcwd()
    title = format_test_title(config, test)
    header = format_test_header(config, test, "  ", index, colors)
    lines = [colors.red(header)]
    annotations: list[Annotation] = []

    for result in test.results:
        failure = format_result_failure(
            config, test, result, "    ", colors.enabled, colors, parser
        )
        if not failure.tokens:
            continue

        result_lines: list[str] = []
        if result.retry:
            result_lines.append("")
            retry = pad(f"    Retry #{result.retry}", "-", colors)
            result_lines.append(colors.gray(retry))
        result_lines.extend(failure.tokens)

        if include_attachments:
            for i, attachment in enumerate(result.attachments, start=1):
                result_lines.extend(
                    _format_attachment(config, attachment, i, colors, cwd)
                )

        result_output = output.get(result, ()) if output is not None else ()
        if include_stdio and result_output:
            result_lines.append("")
            result_lines.append(
                colors.gray(pad("--- Test output", "-", colors))
                + "\n\n"
                + _format_output(result_output, colors)
                + "\n"
                + pad("", "-", colors)
            )

        annotations.append(
            Annotation(
                location=failure.location,
                title=title,
                message="\n".join([header, *result_lines]),
            )
        )
        lines.extend(result_lines)

    lines.append("")
    return FormattedFailure(message="\n".join(lines), annotations=annotations)


def _format_attachment(
    config: ReporterConfig,
    attachment: Attachment,
    number: int,
    colors: Colors,
    cwd: str,
) -> Sequence[str]:
    banner = f"    attachment #{number}: {attachment.name} ({attachment.content_type})"
    lines = ["", colors.cyan(pad(banner, "-", colors))]
    if attachment.path:
        relative_path = os.path.relpath(attachment.path, cwd)
        lines.append(colors.cyan(f"    {relative_path}"))
        if attachment.name == "trace":
            lines.append(colors.cyan("    Usage:"))
            lines.append("")
            usage = f"        {config.trace_command} {relative_path}"
            lines.append(colors.cyan(usage))
            lines.append("")
    elif attachment.content_type.startswith("text/") and attachment.body is not None:
        text = attachment.body
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        if len(text) > ATTACHMENT_PREVIEW_LENGTH:
            text = text[:ATTACHMENT_PREVIEW_LENGTH] + "..."
        lines.append(colors.cyan(f"    {text}"))
    lines.append(colors.cyan(pad("   ", "-", colors)))
    return lines


def _format_output(output: Sequence[TestOutput], colors: Colors) -> str:
    return "".join(
        colors.red(chunk.text) if chunk.stream == "stderr" else chunk.text
        for chunk in output
    )


def format_number(value: float) -> str:
    """Render whole numbers without a trailing fraction."""
    return str(int(value)) if float(value).is_integer() else str(value)


def format_duration(milliseconds: float) -> str:
    """Short human readable duration: 850ms, 3s, 2m, 1h, 2d."""
    for unit, size in _DURATION_UNITS:
        if abs(milliseconds) >= size:
            return f"{math.floor(milliseconds / size + 0.5)}{unit}"
    return f"{format_number(milliseconds)}ms"
