"""
Common utilities for CLI commands.

This module provides shared functionality used across multiple CLI commands
to reduce code duplication and ensure consistent behavior.
"""

import sys
from typing import Any, Callable, Optional

from vmtrace.config import Config
from vmtrace.core.address_directory import AddressDirectory
from vmtrace.core.formatter import print_call, print_event, print_logs, print_vm_details
from vmtrace.core.resolver import SelectorResolver
from vmtrace.models import ExecutionTrace, ShowCalls
from vmtrace.utils.colors import bold, dim, set_colors_enabled
from vmtrace.utils.exceptions import format_error
from vmtrace.utils.logging import get_render_logger, logger


def build_config(args: Any) -> Config:
    """
    Build the configuration from the environment and command arguments.

    Args:
        args: Parsed command arguments

    Returns:
        Config with CLI overrides applied
    """
    config = Config.from_env().with_overrides(
        zksync_home=getattr(args, 'zksync_home', None),
        rpc_url=getattr(args, 'rpc_url', None),
        resolver_timeout=getattr(args, 'resolver_timeout', None),
    )
    if getattr(args, 'no_color', False):
        config = config.with_overrides(use_colors=False)
    if not config.use_colors:
        set_colors_enabled(False)
    return config


def handle_command_error(
    e: Exception,
    json_mode: bool = False,
    exit_code: int = 1
) -> int:
    """
    Handle command errors uniformly.

    Args:
        e: The exception that occurred
        json_mode: If True, output as JSON
        exit_code: Exit code to return

    Returns:
        Exit code
    """
    logger.debug(f"Command failed: {e!r}")
    error_output = format_error(e, json_mode)
    if json_mode:
        print(error_output)
    else:
        print(error_output, file=sys.stderr)
    return exit_code


def render_trace(
    trace: ExecutionTrace,
    args: Any,
    config: Config,
    sink: Optional[Callable[[str], None]] = None,
) -> None:
    """
    Print every part of a trace that the command arguments ask for.

    Args:
        trace: Trace to render
        args: Parsed command arguments (show_calls, resolve_hashes, ...)
        config: Active configuration
        sink: Line output (the rendered-output logger when None)
    """
    sink = sink or get_render_logger().info
    show_calls = ShowCalls.parse(getattr(args, 'show_calls', 'user'))
    resolve_hashes = getattr(args, 'resolve_hashes', False)
    directory = AddressDirectory.default()
    resolver = SelectorResolver(config) if resolve_hashes else None

    if trace.tx_hash:
        sink(f"{bold('Transaction:')} {trace.tx_hash}")

    if trace.call is not None and show_calls != ShowCalls.NONE:
        sink("")
        sink(bold("Call traces:"))
        print_call(trace.call, show_calls, resolve_hashes, directory, resolver, sink=sink)

    if trace.events:
        sink("")
        sink(bold("Events:"))
        for event in trace.events:
            print_event(event, resolve_hashes, directory, resolver, sink=sink)

    if getattr(args, 'show_storage_logs', False):
        sink("")
        sink(bold("Storage logs:"))
        if not trace.storage_logs:
            sink(dim("No storage accesses"))
        for entry in trace.storage_logs:
            print_logs(entry, directory, sink=sink)

    if getattr(args, 'show_vm_details', False) and trace.summary is not None:
        print_vm_details(trace.summary, sink=sink)
