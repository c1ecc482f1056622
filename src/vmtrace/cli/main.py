#!/usr/bin/env python3
"""
Main entry point for vmtrace

This module serves as the CLI entry point, handling argument parsing
and routing to the appropriate command implementations in the cli/ module.
"""

import sys
import argparse

from vmtrace import __version__
from vmtrace.models import ShowCalls
from vmtrace.utils.logging import setup_logging, setup_render_output

from .render import render_command
from .trace import trace_command
from .contracts import list_contracts_command


def _add_render_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--show-calls', default='user', type=str.lower, choices=[m.value for m in ShowCalls], help='Which calls to print (default: user)')
    parser.add_argument('--resolve-hashes', action='store_true', help='Resolve function selectors and event topics through public signature databases')
    parser.add_argument('--show-storage-logs', action='store_true', help='Print storage reads and writes')
    parser.add_argument('--show-vm-details', action='store_true', help='Print the VM execution summary')
    parser.add_argument('--resolver-timeout', type=float, default=None, help='Timeout in seconds for each signature lookup')
    parser.add_argument('--json', action='store_true', help='Report errors as JSON')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='vmtrace', description='vmtrace - VM execution trace viewer')
    parser.add_argument('--version', '-v', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress log output')
    parser.add_argument('--log-file', help='Also write diagnostic logs to this file')
    parser.add_argument('--render-log', help='Also write rendered output, without colors, to this file')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')

    subparsers = parser.add_subparsers(dest='command', help='Commands')
    subparsers.required = True

    # render command
    render_parser = subparsers.add_parser('render', help='Render a trace dump written by the node')
    render_parser.add_argument('trace_file', help='Path to the JSON trace dump')
    _add_render_options(render_parser)

    # trace command
    trace_parser = subparsers.add_parser('trace', help='Fetch and render the call trace of a mined transaction')
    trace_parser.add_argument('tx_hash', help='Transaction hash to trace')
    trace_parser.add_argument('--rpc-url', '-r', default=None, help='RPC URL (default: $RPC_URL or http://localhost:8011)')
    _add_render_options(trace_parser)

    # contracts command
    contracts_parser = subparsers.add_parser('contracts', help='Show the system contracts used for each execution mode')
    contracts_parser.add_argument('--source', '-s', default='builtin', choices=['builtin', 'local', 'builtin-no-security'], help='Where to load bytecode from (default: builtin)')
    contracts_parser.add_argument('--zksync-home', default=None, help='System contracts checkout for --source local (default: $ZKSYNC_HOME)')
    contracts_parser.add_argument('--deployed', action='store_true', help='Also list the contracts deployed at genesis')
    contracts_parser.add_argument('--json', action='store_true', help='Output as JSON')

    return parser


def main(argv=None) -> int:
    """Main entry point for vmtrace CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        quiet=args.quiet,
        debug=args.debug,
        log_file=args.log_file,
        use_colors=not args.no_color,
    )
    setup_render_output(render_log=args.render_log)

    if args.command == 'render':
        return render_command(args)
    elif args.command == 'trace':
        return trace_command(args)
    elif args.command == 'contracts':
        return list_contracts_command(args)

    return 0


if __name__ == '__main__':
    sys.exit(main())
