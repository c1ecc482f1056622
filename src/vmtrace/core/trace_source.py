"""
Where execution traces come from.

A trace is either read from a JSON dump written by the node, or fetched for
a mined transaction over JSON-RPC: the call tree through
``debug_traceTransaction`` with the ``callTracer`` and the events from the
transaction receipt.
"""

import json
from pathlib import Path
from typing import Any, Dict

from web3 import Web3

from ..models import CallTraceNode, EventRecord, ExecutionTrace
from ..utils.exceptions import (
    RPCConnectionError,
    TraceFormatError,
    TransactionError,
    format_exception_message,
)
from ..utils.logging import get_logger

logger = get_logger('trace_source')


def load_trace(path) -> ExecutionTrace:
    """
    Load a trace dump.

    Raises:
        TraceFormatError: if the file cannot be read or does not match the schema
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except OSError as e:
        raise TraceFormatError(f"Cannot read trace file {path}: {e.strerror}", source=str(path))
    except ValueError as e:
        raise TraceFormatError(f"Trace file {path} is not valid JSON: {e}", source=str(path))
    logger.debug(f"Loaded trace dump {path}")
    return ExecutionTrace.from_dict(data, source=str(path))


class RpcTraceFetcher:
    """
    Fetches call trees and events of mined transactions from a node.
    """

    def __init__(self, rpc_url: str, timeout: int = 30, w3: Web3 = None):
        self.rpc_url = rpc_url
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

        try:
            # Use a direct RPC call instead of is_connected() for a reliable check
            self.w3.eth.block_number
        except Exception as e:
            raise RPCConnectionError(
                f"Failed to connect to {rpc_url}: {format_exception_message(e)}",
                rpc_url=rpc_url,
            )

    def fetch_call_tree(self, tx_hash: str) -> CallTraceNode:
        response = self.w3.provider.make_request(
            "debug_traceTransaction", [tx_hash, {"tracer": "callTracer"}]
        )
        if "error" in response:
            error = response["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise TransactionError(f"debug_traceTransaction failed: {message}", tx_hash=tx_hash)

        result = response.get("result")
        if not isinstance(result, dict):
            raise TransactionError("Node returned an empty call trace", tx_hash=tx_hash)
        try:
            return CallTraceNode.from_dict(result)
        except (KeyError, ValueError, TypeError) as e:
            raise TraceFormatError(f"Malformed call trace: {e}", source=tx_hash)

    def fetch_events(self, tx_hash: str) -> list:
        try:
            receipt = self.w3.eth.get_transaction_receipt(tx_hash)
        except Exception as e:
            raise TransactionError(
                f"Cannot get receipt: {format_exception_message(e)}", tx_hash=tx_hash
            )
        events = []
        for log in receipt.get("logs", []):
            try:
                events.append(EventRecord.from_dict(_log_to_dict(log)))
            except (KeyError, ValueError, TypeError) as e:
                raise TraceFormatError(f"Malformed log entry: {e}", source=tx_hash)
        return events

    def fetch_trace(self, tx_hash: str) -> ExecutionTrace:
        """Call tree and events of a mined transaction."""
        logger.debug(f"Tracing {tx_hash} on {self.rpc_url}")
        return ExecutionTrace(
            call=self.fetch_call_tree(tx_hash),
            events=self.fetch_events(tx_hash),
            tx_hash=tx_hash,
        )


def _log_to_dict(log: Any) -> Dict[str, Any]:
    return {
        "address": log["address"],
        "topics": list(log.get("topics", [])),
        "data": log.get("data", b""),
    }
