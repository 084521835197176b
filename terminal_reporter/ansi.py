"""Helpers for strings that contain ANSI escape sequences."""

import re

RESET = "\x1b[0m"

ANSI_ESCAPE = re.compile(
    r"[\u001b\u009b][\[\]()#;?]*"
    r"(?:(?:(?:[a-zA-Z\d]*(?:;[-a-zA-Z\d/#&.:=?%@~_]*)*)?\u0007)"
    r"|(?:(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PR-TZcf-ntqry=><~]))"
)


def strip_ansi_escapes(text: str) -> str:
    """Remove CSI and OSC escape sequences, keeping visible characters."""
    return ANSI_ESCAPE.sub("", text)


def fit_to_screen(line: str, width: int, suffix: str | None = None) -> str:
    """Truncate a line to the visible width, leaving room for a suffix.

    Escape sequences do not count towards the width. A truncated line always
    ends with a reset so that its colors do not bleed into the next line.
    """
    width -= len(strip_ansi_escapes(suffix)) if suffix else 0
    if len(strip_ansi_escapes(line)) <= width:
        return line

    width = max(width, 0)
    ansi_length = 0
    for match in ANSI_ESCAPE.finditer(line):
        if match.start() - ansi_length >= width:
            break
        ansi_length += len(match.group())
    return line[: width + ansi_length] + RESET
