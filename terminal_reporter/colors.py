"""Terminal colors that can be switched off as a whole."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TextIO

from rich.color import ColorSystem
from rich.style import Style

RED = Style(color="red")
YELLOW = Style(color="yellow")
GREEN = Style(color="green")
GRAY = Style(color="bright_black")
CYAN = Style(color="cyan")
DIM = Style(dim=True)


@dataclass(frozen=True, kw_only=True)
class Colors:
    """Wraps text in ANSI styles, or leaves it untouched when disabled."""

    enabled: bool = True

    @classmethod
    def for_stream(
        cls, stream: TextIO, environ: Mapping[str, str] | None = None
    ) -> "Colors":
        """Enable colors for terminals unless NO_COLOR or FORCE_COLOR say otherwise."""
        env = os.environ if environ is None else environ
        if "FORCE_COLOR" in env:
            return cls(enabled=env["FORCE_COLOR"] not in {"0", "false"})
        if "NO_COLOR" in env:
            return cls(enabled=False)
        isatty = getattr(stream, "isatty", None)
        return cls(enabled=bool(isatty and isatty()))

    def red(self, text: str) -> str:
        return self._paint(text, RED)

    def yellow(self, text: str) -> str:
        return self._paint(text, YELLOW)

    def green(self, text: str) -> str:
        return self._paint(text, GREEN)

    def gray(self, text: str) -> str:
        return self._paint(text, GRAY)

    def cyan(self, text: str) -> str:
        return self._paint(text, CYAN)

    def dim(self, text: str) -> str:
        return self._paint(text, DIM)

    def _paint(self, text: str, style: Style) -> str:
        if not self.enabled:
            return text
        return style.render(text, color_system=ColorSystem.STANDARD)


NO_COLORS = Colors(enabled=False)
