"""Render a short excerpt of source code around an error location."""

import logging
from collections.abc import Sequence

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style
from rich.syntax import Syntax

from terminal_reporter.colors import GRAY, RED
from terminal_reporter.models.result import Location

log = logging.getLogger(__name__)

LINES_ABOVE = 2
LINES_BELOW = 3


def render_code_frame(
    source: str,
    location: Location,
    highlight_code: bool = False,
    lines_above: int = LINES_ABOVE,
    lines_below: int = LINES_BELOW,
) -> str:
    """Render the lines around ``location`` with a gutter and a column marker.

    Raises:
        ValueError: If the location is outside of the source.

    """
    lines = source.split("\n")
    if not 1 <= location.line <= len(lines):
        raise ValueError(
            f"Line {location.line} is outside of {location.file} ({len(lines)} lines)"
        )

    start = max(location.line - lines_above, 1)
    end = min(location.line + lines_below, len(lines))
    shown = _highlight(source, location.file) if highlight_code else lines
    number_width = len(str(end))

    frame: list[str] = []
    for number in range(start, end + 1):
        code = shown[number - 1] if number <= len(shown) else lines[number - 1]
        is_error_line = number == location.line
        marker = _paint(">", RED, highlight_code) if is_error_line else " "
        gutter = _paint(f" {number:>{number_width}} |", GRAY, highlight_code)
        frame.append(f"{marker}{gutter}" + (f" {code}" if code else ""))
        if is_error_line and location.column > 0:
            prefix = lines[number - 1][: location.column - 1]
            spacing = "".join(c if c == "\t" else " " for c in prefix)
            caret_gutter = _paint(f" {' ' * number_width} |", GRAY, highlight_code)
            caret = _paint("^", RED, highlight_code)
            frame.append(f" {caret_gutter} {spacing}{caret}")
    return "\n".join(frame)


def _paint(text: str, style: Style, highlight_code: bool) -> str:
    if not highlight_code:
        return text
    return style.render(text, color_system=ColorSystem.STANDARD)


def _highlight(source: str, path: str) -> Sequence[str]:
    # tab_size=0 keeps tabs so the caret line stays aligned with the code
    syntax = Syntax(
        source, Syntax.guess_lexer(path, source), theme="ansi_dark", tab_size=0
    )
    console = Console(color_system="standard", force_terminal=True, highlight=False)
    lines = syntax.highlight(source).split("\n", allow_blank=True)
    log.debug("Highlighted %d line(s) of %s", len(lines), path)
    return [
        "".join(
            _paint(segment.text, segment.style, True) if segment.style else segment.text
            for segment in line.render(console)
        )
        for line in lines
    ]
