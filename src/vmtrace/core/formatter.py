"""
Human-readable rendering of VM execution results.

Each ``format_*`` function returns the lines to show; the matching
``print_*`` function sends them to a line sink (the ``vmtrace.formatter``
logger unless another callable is given).

Selector resolution is optional and best-effort: with ``resolve_hashes``
off the resolver is never called, and a failed lookup renders exactly like
an unresolved one.
"""

from typing import Callable, List, Optional

from ..models import (
    CallTraceNode,
    ContractType,
    EventRecord,
    ExecutionSummary,
    ShowCalls,
    StorageLogEntry,
)
from ..utils.colors import blue, bold, ljust, on_red, rjust, strip_ansi
from ..utils.logging import get_logger
from .address_directory import AddressDirectory, raw_address
from .resolver import SelectorResolver

logger = get_logger('formatter')

Sink = Callable[[str], None]

INDENT_STEP = 2
TARGET_WIDTH = 52
SELECTOR_WIDTH = 16
EVENT_ADDRESS_WIDTH = 42
LABEL_WIDTH = 15
SEPARATOR_WIDTH = 82


def _emit(lines: List[str], sink: Optional[Sink]) -> None:
    out = sink or logger.info
    for line in lines:
        out(line)


def should_show_call(contract_type: ContractType, show_calls: ShowCalls) -> bool:
    """Visibility of a call to a contract of ``contract_type`` under ``show_calls``."""
    if show_calls == ShowCalls.ALL:
        return True
    if show_calls == ShowCalls.NONE:
        return False
    # only 'user' and 'system' remain
    if contract_type in (ContractType.UNKNOWN, ContractType.POPULAR):
        return True
    if contract_type == ContractType.PRECOMPILE:
        return False
    return show_calls == ShowCalls.SYSTEM


def _hex(data: bytes) -> str:
    return '0x' + data.hex()


def _function_signature(
    call: CallTraceNode,
    contract_type: ContractType,
    resolve_hashes: bool,
    resolver: Optional[SelectorResolver],
) -> str:
    if len(call.input) < 4:
        return _hex(call.input)

    selector = call.input[:4]
    raw = rjust(_hex(selector), SELECTOR_WIDTH)
    if contract_type == ContractType.PRECOMPILE or not resolve_hashes:
        return raw
    return resolver.resolve_function_selector(selector) or raw


def _format_call_line(
    call: CallTraceNode,
    depth: int,
    contract_type: ContractType,
    resolve_hashes: bool,
    directory: AddressDirectory,
    resolver: Optional[SelectorResolver],
) -> str:
    target = directory.human_readable(call.to)
    if target is None:
        target = bold(raw_address(call.to))

    parts = [
        ' ' * (depth * INDENT_STEP) + call.call_type.value,
        ljust(target, TARGET_WIDTH),
        _function_signature(call, contract_type, resolve_hashes, resolver),
    ]
    if call.revert_reason is not None:
        parts.append(f"Revert: {call.revert_reason}")
    if call.error is not None:
        parts.append(f"Error: {call.error}")
    parts.append(str(call.gas_used))

    line = ' '.join(parts)
    if call.failed:
        return on_red(strip_ansi(line))
    return line


def format_call(
    call: CallTraceNode,
    show_calls: ShowCalls,
    resolve_hashes: bool = False,
    directory: Optional[AddressDirectory] = None,
    resolver: Optional[SelectorResolver] = None,
    padding: int = 0,
) -> List[str]:
    """
    Render a call and all of its sub-calls, pre-order.

    Visibility is decided per node from its own target; a hidden node's
    children are still visited and keep their depth-based indentation.

    Args:
        call: Root of the call tree
        show_calls: Filtering policy
        resolve_hashes: Try to resolve function selectors to names
        directory: Address directory (process default when None)
        resolver: Selector resolver (process default when None)
        padding: Depth of ``call`` itself

    Returns:
        One line per visible call
    """
    directory = directory or AddressDirectory.default()
    if resolve_hashes and resolver is None:
        resolver = SelectorResolver.default()

    lines: List[str] = []
    stack = [(call, padding)]
    while stack:
        node, depth = stack.pop()
        contract_type = directory.classify(node.to)
        if should_show_call(contract_type, show_calls):
            lines.append(_format_call_line(node, depth, contract_type, resolve_hashes, directory, resolver))
        # reversed so the first child is rendered first
        for child in reversed(node.children):
            stack.append((child, depth + 1))
    return lines


def print_call(
    call: CallTraceNode,
    show_calls: ShowCalls,
    resolve_hashes: bool = False,
    directory: Optional[AddressDirectory] = None,
    resolver: Optional[SelectorResolver] = None,
    padding: int = 0,
    sink: Optional[Sink] = None,
) -> None:
    """Pretty-prints a call, including sub-calls."""
    _emit(format_call(call, show_calls, resolve_hashes, directory, resolver, padding), sink)


def format_event(
    event: EventRecord,
    resolve_hashes: bool = False,
    directory: Optional[AddressDirectory] = None,
    resolver: Optional[SelectorResolver] = None,
) -> str:
    """Render an event as ``<address label> <topic>, <topic>, ...``."""
    directory = directory or AddressDirectory.default()
    if resolve_hashes and resolver is None:
        resolver = SelectorResolver.default()

    topics = []
    for topic in event.indexed_topics:
        name = resolver.resolve_event_selector(topic) if resolve_hashes else None
        topics.append(name or _hex(topic))

    label = directory.human_readable(event.address)
    if label is None:
        label = blue(raw_address(event.address))
    return f"{ljust(label, EVENT_ADDRESS_WIDTH)} {', '.join(topics)}"


def print_event(
    event: EventRecord,
    resolve_hashes: bool = False,
    directory: Optional[AddressDirectory] = None,
    resolver: Optional[SelectorResolver] = None,
    sink: Optional[Sink] = None,
) -> None:
    """Pretty-prints an event."""
    _emit([format_event(event, resolve_hashes, directory, resolver)], sink)


def format_storage_log(
    entry: StorageLogEntry,
    directory: Optional[AddressDirectory] = None,
) -> List[str]:
    """Render a storage access followed by a separator line."""
    directory = directory or AddressDirectory.default()
    address = directory.human_readable(entry.address) or raw_address(entry.address)

    lines = [
        f"{'Type:':<{LABEL_WIDTH}} {entry.log_type.value}",
        f"{'Address:':<{LABEL_WIDTH}} {address}",
        f"{'Key:':<{LABEL_WIDTH}} {entry.key:#066x}",
        f"{'Read Value:':<{LABEL_WIDTH}} {entry.read_value:#066x}",
    ]
    if entry.is_write:
        lines.append(f"{'Written Value:':<{LABEL_WIDTH}} {entry.written_value:#066x}")
    lines.append("─" * SEPARATOR_WIDTH)
    return lines


def print_logs(
    entry: StorageLogEntry,
    directory: Optional[AddressDirectory] = None,
    sink: Optional[Sink] = None,
) -> None:
    _emit(format_storage_log(entry, directory), sink)


def format_vm_details(summary: ExecutionSummary) -> List[str]:
    lines = [
        "",
        "┌──────────────────────────┐",
        "│   VM EXECUTION RESULTS   │",
        "└──────────────────────────┘",
        f"Cycles Used:          {summary.cycles_used}",
        f"Computation Gas Used: {summary.computational_gas_used}",
        f"Contracts Used:       {summary.contracts_used}",
    ]
    if summary.revert_reason is not None:
        lines.append("")
        lines.append(on_red(f"[!] Revert Reason:    {summary.revert_reason}"))
    lines.append("════════════════════════════")
    return lines


def print_vm_details(summary: ExecutionSummary, sink: Optional[Sink] = None) -> None:
    _emit(format_vm_details(summary), sink)
