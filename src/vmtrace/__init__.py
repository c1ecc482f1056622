"""
vmtrace - VM execution trace viewer and system contracts loader
"""

__version__ = "0.1.0"

# Main entry point
from .cli.main import main

# Data model
from .models import (
    ContractType,
    KnownAddress,
    CallType,
    CallTraceNode,
    EventRecord,
    StorageLogType,
    StorageLogEntry,
    ExecutionSummary,
    ExecutionTrace,
    ShowCalls,
)

# Core components
from .core import (
    AddressDirectory,
    SelectorResolver,
    format_call,
    print_call,
    format_event,
    print_event,
    format_storage_log,
    print_logs,
    format_vm_details,
    print_vm_details,
    BytecodeSource,
    TxExecutionMode,
    BaseSystemContracts,
    SystemContracts,
)

# Utilities
from .config import Config
from .utils import (
    VmtraceError,
    AddressMapError,
    SystemContractsError,
    ArtifactNotFoundError,
    setup_logging,
)

__all__ = [
    # Version
    '__version__',
    # Main
    'main',
    # Models
    'ContractType',
    'KnownAddress',
    'CallType',
    'CallTraceNode',
    'EventRecord',
    'StorageLogType',
    'StorageLogEntry',
    'ExecutionSummary',
    'ExecutionTrace',
    'ShowCalls',
    # Core
    'AddressDirectory',
    'SelectorResolver',
    'format_call',
    'print_call',
    'format_event',
    'print_event',
    'format_storage_log',
    'print_logs',
    'format_vm_details',
    'print_vm_details',
    'BytecodeSource',
    'TxExecutionMode',
    'BaseSystemContracts',
    'SystemContracts',
    # Utils
    'Config',
    'VmtraceError',
    'AddressMapError',
    'SystemContractsError',
    'ArtifactNotFoundError',
    'setup_logging',
]
