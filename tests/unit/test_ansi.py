"""Tests for ANSI escape helpers."""

import pytest

from terminal_reporter.ansi import ANSI_ESCAPE, RESET, fit_to_screen, strip_ansi_escapes

RED_HELLO_WORLD = "\x1b[31mhello world\x1b[0m"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("plain", "plain"),
        ("\x1b[31mred\x1b[0m", "red"),
        ("\x1b[1;33mbold yellow\x1b[39;22m", "bold yellow"),
        ("\x1b]8;;https://example.com\x07link\x1b]8;;\x07", "link"),
        ("a\x1b[2Kb\x1b[1Gc", "abc"),
        ("\x9b31mcsi\x9b0m", "csi"),
    ],
)
def test_strip_ansi_escapes(text: str, expected: str) -> None:
    """Removes CSI and OSC sequences and keeps visible characters in order."""
    assert strip_ansi_escapes(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "no escapes", RED_HELLO_WORLD, "\x1b[31m\x1b[1mnested\x1b[0m tail"],
)
def test_strip_ansi_escapes_is_idempotent(text: str) -> None:
    """Stripping twice gives the same result and leaves no escapes behind."""
    stripped = strip_ansi_escapes(text)

    assert strip_ansi_escapes(stripped) == stripped
    assert ANSI_ESCAPE.search(stripped) is None


def test_strip_ansi_escapes_keeps_no_state_between_calls() -> None:
    """Repeated calls on the same input give the same answer."""
    results = {strip_ansi_escapes(RED_HELLO_WORLD) for _ in range(3)}

    assert results == {"hello world"}


@pytest.mark.parametrize(
    ("line", "width"),
    [
        ("hello", 10),
        ("hello", 5),
        (RED_HELLO_WORLD, 11),
        ("", 0),
    ],
)
def test_fit_to_screen_returns_line_that_fits(line: str, width: int) -> None:
    """Lines whose visible length fits are returned unchanged."""
    assert fit_to_screen(line, width) == line


def test_fit_to_screen_truncates_plain_line() -> None:
    """Cuts at the width and resets styles."""
    assert fit_to_screen("hello world", 5) == "hello" + RESET


def test_fit_to_screen_keeps_leading_escapes() -> None:
    """Escape sequences before the cut do not count towards the width."""
    assert fit_to_screen(RED_HELLO_WORLD, 5) == "\x1b[31mhello" + RESET


def test_fit_to_screen_keeps_escapes_in_the_middle() -> None:
    """Escapes between visible characters are kept as a whole."""
    line = "ab\x1b[32mcd\x1b[0mef"

    assert fit_to_screen(line, 3) == "ab\x1b[32mc" + RESET


def test_fit_to_screen_reserves_room_for_suffix() -> None:
    """Only the visible part of the suffix is reserved."""
    suffix = "\x1b[2m (3s)\x1b[0m"

    assert fit_to_screen("hello world", 10, suffix=suffix) == "hello" + RESET


@pytest.mark.parametrize("width", [0, -3])
def test_fit_to_screen_without_room(width: int) -> None:
    """Nothing visible is left when there is no room at all."""
    assert fit_to_screen(RED_HELLO_WORLD, width) == RESET


@pytest.mark.parametrize("width", [1, 4, 7, 10])
def test_fit_to_screen_truncated_line_fits(width: int) -> None:
    """Truncated lines never exceed the width and always end with a reset."""
    line = "\x1b[31mred\x1b[0m \x1b[32mgreen\x1b[0m \x1b[34mblue\x1b[0m"

    fitted = fit_to_screen(line, width)

    assert len(strip_ansi_escapes(fitted)) <= width
    assert fitted.endswith(RESET)
