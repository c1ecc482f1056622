"""
Render command implementation.

Prints a trace dump (call tree, events, storage log, VM summary) written by
the node.
"""

from vmtrace.cli.common import build_config, handle_command_error, render_trace
from vmtrace.core.trace_source import load_trace
from vmtrace.utils.exceptions import VmtraceError
from vmtrace.utils.logging import logger


def render_command(args) -> int:
    """
    Execute the render command.

    Args:
        args: Parsed command arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    json_mode = getattr(args, 'json', False)
    try:
        config = build_config(args)
        trace = load_trace(args.trace_file)
    except (VmtraceError, ValueError) as e:
        return handle_command_error(e, json_mode)

    logger.debug(f"Rendering {args.trace_file}")
    render_trace(trace, args, config)
    return 0
