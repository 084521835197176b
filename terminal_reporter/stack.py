"""Split raw stack traces and locate the frame that raised."""

import os
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import unquote, urlparse

from terminal_reporter.models.result import Location

FRAME_PREFIX = "    at "

_FRAME_LINE = re.compile(
    r"^\s*at (?:(?:async |new )?(?P<function>.*?) \()?"
    r"(?P<file>.+?):(?P<line>\d+):(?P<column>\d+)\)?$"
)


@dataclass(frozen=True, kw_only=True)
class ParsedFrame:
    """Source position recovered from a single frame line."""

    file: str
    line: int
    column: int
    function: str | None = None


class FrameParser(Protocol):
    """Maps one stack frame line to a source position."""

    def parse_line(self, line: str) -> ParsedFrame | None:
        """Return the frame position, or None when the line is not understood."""
        ...


class V8FrameParser:
    """Parser for `at fn (file:line:col)` frames printed by V8-style runtimes."""

    def parse_line(self, line: str) -> ParsedFrame | None:
        match = _FRAME_LINE.match(line)
        if match is None:
            return None
        file = match["file"]
        if file.startswith("file://"):
            file = unquote(urlparse(file).path)
        return ParsedFrame(
            file=file,
            line=int(match["line"]),
            column=int(match["column"]),
            function=match["function"] or None,
        )


@dataclass(frozen=True, kw_only=True)
class ParsedStack:
    """Stack trace split into the human readable message and its frames."""

    message: str
    stack_lines: Sequence[str]
    location: Location | None = None


DEFAULT_FRAME_PARSER = V8FrameParser()


def prepare_error_stack(
    stack: str,
    parser: FrameParser = DEFAULT_FRAME_PARSER,
    cwd: str | None = None,
) -> ParsedStack:
    """Split a stack trace and find the first frame that points at a file.

    Everything before the first frame line is the message. Relative frame
    paths are resolved against ``cwd`` (the working directory by default).
    Frames the parser does not understand are skipped.
    """
    lines = stack.split("\n")
    first_frame = next(
        (i for i, line in enumerate(lines) if line.startswith(FRAME_PREFIX)),
        len(lines),
    )
    message = "\n".join(lines[:first_frame])
    stack_lines = lines[first_frame:]

    location = None
    for line in stack_lines:
        frame = parser.parse_line(line)
        if frame is not None and frame.file:
            location = Location(
                file=os.path.join(cwd or os.getcwd(), frame.file),
                line=frame.line,
                column=frame.column,
            )
            break

    return ParsedStack(message=message, stack_lines=stack_lines, location=location)
