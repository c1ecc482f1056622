"""
Utilities module for vmtrace.

Provides exception handling, logging and colors.
"""

from .exceptions import (
    VmtraceError,
    AddressMapError,
    SystemContractsError,
    ArtifactNotFoundError,
    InvalidBytecodeError,
    TraceFormatError,
    RPCConnectionError,
    TransactionError,
    format_error,
    format_exception_message,
)
from .logging import setup_logging, setup_render_output, get_logger, get_render_logger, logger
from .colors import (
    Colors,
    SUPPORTS_COLOR,
    set_colors_enabled,
    colors_enabled,
    red, green, yellow, blue, cyan,
    bold, dim, on_red,
    error, success, warning, info,
)

__all__ = [
    # Exceptions
    'VmtraceError',
    'AddressMapError',
    'SystemContractsError',
    'ArtifactNotFoundError',
    'InvalidBytecodeError',
    'TraceFormatError',
    'RPCConnectionError',
    'TransactionError',
    # Formatting
    'format_error',
    'format_exception_message',
    # Logging
    'setup_logging',
    'setup_render_output',
    'get_logger',
    'get_render_logger',
    'logger',
    # Colors
    'Colors',
    'SUPPORTS_COLOR',
    'set_colors_enabled',
    'colors_enabled',
    'red', 'green', 'yellow', 'blue', 'cyan',
    'bold', 'dim', 'on_red',
    'error', 'success', 'warning', 'info',
]
