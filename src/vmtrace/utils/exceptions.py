"""
Custom exceptions for vmtrace.

This module provides a hierarchy of exceptions for the error cases of the
trace renderer and the system contracts loader, along with utilities for
formatting errors consistently.
"""

import json
from typing import Any, Dict, Optional


class VmtraceError(Exception):
    """
    Base exception for all vmtrace errors.

    Attributes:
        message: Human-readable error message
        details: Additional context as key-value pairs
        error_code: Optional error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error": True,
            "type": self.error_code,
            "message": self.message,
            **self.details
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


# ============================================================================
# Address map errors
# ============================================================================

class AddressMapError(VmtraceError):
    """Raised when the embedded address dataset cannot be parsed.

    This is a packaging defect, never a recoverable condition.
    """

    def __init__(self, message: str, entry: Optional[int] = None, **kwargs):
        details = {"entry": entry} if entry is not None else {}
        details.update(kwargs)
        super().__init__(message, details, "AddressMapError")


# ============================================================================
# System contracts errors
# ============================================================================

class SystemContractsError(VmtraceError):
    """Raised when the system contracts set cannot be built."""

    def __init__(
        self,
        message: str,
        contract: Optional[str] = None,
        **kwargs
    ):
        details = {}
        if contract:
            details["contract"] = contract
        details.update(kwargs)
        super().__init__(message, details, "SystemContractsError")


class ArtifactNotFoundError(SystemContractsError):
    """Raised when a bytecode artifact is missing or unreadable."""

    def __init__(self, contract: str, path: str, reason: Optional[str] = None, **kwargs):
        message = f"Bytecode artifact for {contract} not found at {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message, contract=contract, path=path, **kwargs)
        self.error_code = "ArtifactNotFoundError"


class InvalidBytecodeError(SystemContractsError):
    """Raised when bytecode cannot be hashed (bad length or word count)."""

    def __init__(self, reason: str, contract: Optional[str] = None, **kwargs):
        message = f"Invalid bytecode: {reason}"
        if contract:
            message = f"Invalid bytecode for {contract}: {reason}"
        super().__init__(message, contract=contract, reason=reason, **kwargs)
        self.error_code = "InvalidBytecodeError"


# ============================================================================
# Trace errors
# ============================================================================

class TraceFormatError(VmtraceError):
    """Raised when a trace dump does not match the expected schema."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        details = {"source": source} if source else {}
        details.update(kwargs)
        super().__init__(message, details, "TraceFormatError")


class RPCConnectionError(VmtraceError):
    """Raised when RPC connection fails."""

    def __init__(self, message: str, rpc_url: Optional[str] = None, **kwargs):
        details = {"rpc_url": rpc_url} if rpc_url else {}
        details.update(kwargs)
        super().__init__(message, details, "RPCConnectionError")


class TransactionError(VmtraceError):
    """Raised when a transaction cannot be traced."""

    def __init__(
        self,
        message: str,
        tx_hash: Optional[str] = None,
        **kwargs
    ):
        details = {}
        if tx_hash:
            details["tx_hash"] = tx_hash
        details.update(kwargs)
        super().__init__(message, details, "TransactionError")


# ============================================================================
# Error Formatting Utilities
# ============================================================================

def format_error(e: Exception, json_mode: bool = False) -> str:
    """
    Format an exception for display.

    Args:
        e: The exception to format
        json_mode: If True, output as JSON; otherwise use colored text

    Returns:
        Formatted error string
    """
    from vmtrace.utils.colors import error

    if isinstance(e, VmtraceError):
        if json_mode:
            return e.to_json()
        return error(e.message)
    if json_mode:
        return json.dumps({
            "error": True,
            "type": type(e).__name__,
            "message": str(e)
        }, indent=2)
    return error(str(e))


def format_exception_message(e: Exception) -> str:
    """
    Extract a clean, user-friendly error message from any exception.

    Args:
        e: Exception instance

    Returns:
        Clean error message string
    """
    # Web3RPCError and similar have args[0] as dict
    if hasattr(e, 'args') and e.args:
        first_arg = e.args[0]

        if isinstance(first_arg, dict):
            return first_arg.get('message', str(e))
        elif isinstance(first_arg, str):
            return first_arg
        else:
            return str(first_arg)

    return str(e)
