"""
Logging configuration for vmtrace.

Two channels hang off the ``vmtrace`` logger namespace:

- diagnostics (``vmtrace.*``): level-prefixed messages on stderr, optionally
  mirrored to a log file;
- rendered output (``vmtrace.formatter``): the trace lines themselves, written
  bare to stdout and optionally copied, without ANSI codes, to a render log.

The output channel does not propagate, so ``--quiet`` never hides a rendered
trace and rendered lines never end up in the diagnostics file.
"""

import logging
import sys
from typing import Optional, TextIO

from vmtrace.utils.colors import Colors, strip_ansi

ROOT_LOGGER = 'vmtrace'
RENDER_LOGGER = 'vmtrace.formatter'


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name of diagnostic messages."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.BRIGHT_CYAN,
        logging.WARNING: Colors.BRIGHT_YELLOW,
        logging.ERROR: Colors.BRIGHT_RED,
        logging.CRITICAL: Colors.BOLD + Colors.BRIGHT_RED,
    }

    def __init__(self, fmt: str = None, datefmt: str = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno, '')
        # other handlers share the record
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{Colors.RESET if color else ''}"
        return super().format(record)


class PlainFormatter(logging.Formatter):
    """Formatter for files: escape codes are removed from the final text."""

    def format(self, record: logging.LogRecord) -> str:
        return strip_ansi(super().format(record))


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    level: int = logging.INFO,
    quiet: bool = False,
    debug: bool = False,
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    Configure the diagnostics channel.

    Args:
        level: Console level when not debugging
        quiet: Drop console diagnostics entirely
        debug: Show DEBUG messages (lookups, artifact reads)
        log_file: Also append diagnostics, at DEBUG, to this file
        use_colors: Color level names when stderr is a terminal

    Returns:
        The ``vmtrace`` logger
    """
    effective_level = logging.DEBUG if debug else level

    logger = logging.getLogger(ROOT_LOGGER)
    _reset(logger)
    logger.propagate = False
    logger.setLevel(logging.DEBUG if log_file else effective_level)

    if quiet:
        # keeps logging.lastResort from printing warnings anyway
        logger.addHandler(logging.NullHandler())
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(effective_level)
        supports_color = use_colors and hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()
        console_handler.setFormatter(ColoredFormatter('%(levelname)s: %(message)s', use_colors=supports_color))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(PlainFormatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def setup_render_output(
    stream: Optional[TextIO] = None,
    render_log: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the rendered-output channel.

    Args:
        stream: Where rendered lines go (stdout when None)
        render_log: Also write every rendered line, without colors, to this file

    Returns:
        The ``vmtrace.formatter`` logger; pass its ``info`` as a line sink
    """
    logger = logging.getLogger(RENDER_LOGGER)
    _reset(logger)
    logger.propagate = False
    logger.setLevel(logging.INFO)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)

    if render_log:
        file_handler = logging.FileHandler(render_log, mode='w')
        file_handler.setFormatter(PlainFormatter('%(message)s'))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Child name, e.g. ``'resolver'`` for ``vmtrace.resolver``;
              the ``vmtrace`` logger when None
    """
    if name:
        return logging.getLogger(f'{ROOT_LOGGER}.{name}')
    return logging.getLogger(ROOT_LOGGER)


def get_render_logger() -> logging.Logger:
    return logging.getLogger(RENDER_LOGGER)


logger = get_logger()
