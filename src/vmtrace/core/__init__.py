"""
Core module for vmtrace.

This module contains the main business logic:
- AddressDirectory: well-known address names and classification
- SelectorResolver: best-effort selector/topic name resolution
- formatter: call tree, event, storage log and VM summary rendering
- SystemContracts: bootloader/default account bundles per execution mode
"""

from .address_directory import AddressDirectory
from .resolver import SelectorResolver
from .formatter import (
    should_show_call,
    format_call,
    print_call,
    format_event,
    print_event,
    format_storage_log,
    print_logs,
    format_vm_details,
    print_vm_details,
)
from .bytecode import ContractLanguage, hash_bytecode, bytes_to_be_words
from .system_contracts import (
    BytecodeSource,
    TxExecutionMode,
    SystemContractCode,
    BaseSystemContracts,
    SystemContracts,
    DeployedContract,
    get_deployed_contracts,
)
from .trace_source import load_trace, RpcTraceFetcher

__all__ = [
    'AddressDirectory',
    'SelectorResolver',
    'should_show_call',
    'format_call',
    'print_call',
    'format_event',
    'print_event',
    'format_storage_log',
    'print_logs',
    'format_vm_details',
    'print_vm_details',
    'ContractLanguage',
    'hash_bytecode',
    'bytes_to_be_words',
    'BytecodeSource',
    'TxExecutionMode',
    'SystemContractCode',
    'BaseSystemContracts',
    'SystemContracts',
    'DeployedContract',
    'get_deployed_contracts',
    'load_trace',
    'RpcTraceFetcher',
]
