"""Logging utilities for Waymark.

Console output is tagged and color-coded so graph mutations stand apart from
warnings about missing edges in a running game loop. Set ``WAYMARK_NO_COLOR`` to
get plain text (tests and log files).
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI escape codes used by the loggers below."""

    BLUE = "\033[94m"      # Graph mutations (add, update, remove, discover)
    YELLOW = "\033[93m"    # Recoverable problems (missing edges)
    GREEN = "\033[92m"     # Completed actions
    CYAN = "\033[96m"      # Info

    BOLD = "\033[1m"
    RESET = "\033[0m"


# Markers for message kinds (readable without color)
LOG_TAG_CHANGE = "[•]"
LOG_TAG_WARNING = "[?]"
LOG_TAG_SUCCESS = "[✓]"
LOG_TAG_INFO = "[i]"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap ``text`` in ``color`` unless WAYMARK_NO_COLOR is set."""
    if os.getenv("WAYMARK_NO_COLOR"):
        return text
    start = (Color.BOLD.value if bold else "") + color.value
    return f"{start}{text}{Color.RESET.value}"


def _emit(tag: str, message: str, color: Color) -> None:
    print(colored(f"{tag} {message}", color))


def log_change(message: str) -> None:
    """Log a relationship graph mutation (blue)."""
    _emit(LOG_TAG_CHANGE, message, Color.BLUE)


def log_warning(message: str) -> None:
    """Log a recoverable problem (yellow)."""
    _emit(LOG_TAG_WARNING, message, Color.YELLOW)


def log_success(message: str) -> None:
    _emit(LOG_TAG_SUCCESS, message, Color.GREEN)


def log_info(message: str) -> None:
    _emit(LOG_TAG_INFO, message, Color.CYAN)
