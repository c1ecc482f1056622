"""
ANSI color helpers for terminal output.

Colors are applied only when enabled. Detection happens once at import
(stdout is a TTY and NO_COLOR is unset); ``set_colors_enabled`` overrides it.
"""

import os
import re
import sys

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


class Colors:
    """ANSI escape sequences."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    CYAN = '\033[36m'

    BRIGHT_RED = '\033[91m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_CYAN = '\033[96m'

    ON_RED = '\033[41m'


def _detect_color_support() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    return hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()


SUPPORTS_COLOR = _detect_color_support()

_enabled = SUPPORTS_COLOR


def set_colors_enabled(enabled: bool) -> None:
    """Force colored output on or off."""
    global _enabled
    _enabled = enabled


def colors_enabled() -> bool:
    return _enabled


def colorize(text: str, code: str) -> str:
    if not _enabled:
        return text
    return f"{code}{text}{Colors.RESET}"


def red(text: str) -> str:
    return colorize(text, Colors.RED)


def green(text: str) -> str:
    return colorize(text, Colors.GREEN)


def yellow(text: str) -> str:
    return colorize(text, Colors.YELLOW)


def blue(text: str) -> str:
    return colorize(text, Colors.BLUE)


def cyan(text: str) -> str:
    return colorize(text, Colors.CYAN)


def bold(text: str) -> str:
    return colorize(text, Colors.BOLD)


def dim(text: str) -> str:
    return colorize(text, Colors.DIM)


def on_red(text: str) -> str:
    """Red background, used for failed calls and revert reasons."""
    return colorize(text, Colors.ON_RED)


# Semantic helpers

def error(text: str) -> str:
    return colorize(text, Colors.BRIGHT_RED)


def success(text: str) -> str:
    return green(text)


def warning(text: str) -> str:
    return colorize(text, Colors.BRIGHT_YELLOW)


def info(text: str) -> str:
    return colorize(text, Colors.BRIGHT_CYAN)


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub('', text)


def ljust(text: str, width: int) -> str:
    """Left-justify ``text`` to ``width`` visible columns, ignoring escape codes."""
    return text + ' ' * max(0, width - len(strip_ansi(text)))


def rjust(text: str, width: int) -> str:
    return ' ' * max(0, width - len(strip_ansi(text))) + text
