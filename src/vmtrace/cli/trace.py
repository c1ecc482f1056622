"""
Trace command implementation.

Fetches the call tree and events of a mined transaction from a node and
prints them.
"""

from vmtrace.cli.common import build_config, handle_command_error, render_trace
from vmtrace.core.trace_source import RpcTraceFetcher
from vmtrace.utils.colors import info
from vmtrace.utils.exceptions import VmtraceError


def trace_command(args) -> int:
    """
    Execute the trace command.

    Args:
        args: Parsed command arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    json_mode = getattr(args, 'json', False)
    try:
        config = build_config(args)
        if not json_mode:
            print(f"Connecting to RPC: {info(config.rpc_url)}")
        fetcher = RpcTraceFetcher(config.rpc_url)
        trace = fetcher.fetch_trace(args.tx_hash)
    except (VmtraceError, ValueError) as e:
        return handle_command_error(e, json_mode)

    render_trace(trace, args, config)
    return 0
