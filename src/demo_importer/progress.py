"""Progress presentation utilities."""

from __future__ import annotations

import logging
import os
import shutil
import sys

_BLUE = "\033[34m"
_RED = "\033[31m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"


def _supports_color() -> bool:
    return sys.stdout.isatty() and os.environ.get("NO_COLOR") is None


_COLOR_ENABLED = _supports_color()


def _get_terminal_width() -> int:
    """Get the current terminal width, with fallback to 100."""
    try:
        size = shutil.get_terminal_size(fallback=(100, 24))
        return size.columns
    except OSError:
        return 100


def _truncate_to_fit(text: str, max_width: int | None = None) -> str:
    if max_width is None:
        max_width = _get_terminal_width()

    # ANSI sequences take no visual space
    effective_length = len(text) - text.count("\033[") * 5 if "\033[" in text else len(text)
    if effective_length <= max_width:
        return text

    cut_at = max_width - 3
    if cut_at > 20:
        last_space = text[:cut_at].rfind(" ")
        if last_space > cut_at - 20:
            cut_at = last_space
    return text[:cut_at] + "..."


def paint(text: str, *, color: str | None = None) -> str:
    if not _COLOR_ENABLED:
        return text
    return f"{color or _BLUE}{text}{_RESET}"


def format_progress(current: int, total: int, *, width: int = 20, color: str | None = None) -> str:
    safe_total = max(total, 1)
    safe_current = max(0, min(current, safe_total))
    ratio = safe_current / safe_total
    filled = int(ratio * width)
    if safe_current > 0 and filled == 0:
        filled = 1
    bar = "#" * filled + "-" * (width - filled)
    percent = int(round(ratio * 100))
    return f"{paint('[' + bar + ']', color=color)} {percent:3d}% ({safe_current}/{safe_total})"


class ProgressTracker:
    """Emit one progress log line per processed demo."""

    def __init__(self, total: int, *, width: int = 20) -> None:
        self.total = max(int(total), 1)
        self.width = width
        self.current = 0

    def _emit(self, logger: logging.Logger, message: str, color: str | None) -> None:
        text = f"{format_progress(self.current, self.total, width=self.width, color=color)} {message}"
        logger.info(_truncate_to_fit(text))

    def start(self, logger: logging.Logger, message: str) -> None:
        """Announce the next item without advancing the bar."""
        self._emit(logger, message, _BLUE)

    def advance(self, logger: logging.Logger, message: str, *, ok: bool = True) -> None:
        self.current = min(self.total, self.current + 1)
        self._emit(logger, message, _GREEN if ok else _YELLOW)

    def fail(self, logger: logging.Logger, message: str) -> None:
        """Report a problem that needs operator attention."""
        self.current = min(self.total, self.current + 1)
        logger.error(paint(message, color=_RED))


__all__ = ["ProgressTracker", "format_progress", "paint"]
