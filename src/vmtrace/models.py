"""
Trace data model.

Plain dataclasses for the artifacts a VM run leaves behind (call tree,
events, storage log, execution summary) together with the enums that drive
rendering. Every record can be built from the JSON shape emitted by the node
(``from_dict``); hex strings and integers are both accepted for numeric and
byte fields.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from eth_utils import decode_hex, to_normalized_address

from .utils.exceptions import TraceFormatError
from .utils.logging import get_logger

logger = get_logger('models')

BytesLike = Union[bytes, bytearray, str]

ZERO_ADDRESS = '0x' + '00' * 20


def normalize_address(value: BytesLike) -> str:
    """Return ``value`` as a lowercase 0x-prefixed 20-byte address.

    Raises:
        ValueError: if the value is not a valid address
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise ValueError(f"Address must be 20 bytes, got {len(value)}")
        return '0x' + bytes(value).hex()
    if isinstance(value, str) and not value.startswith(('0x', '0X')):
        value = '0x' + value
    return to_normalized_address(value)


def to_bytes(value: Any) -> bytes:
    """Coerce hex strings, byte strings and lists of ints into ``bytes``."""
    if value is None:
        return b''
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return decode_hex(value) if value else b''
    if isinstance(value, list):
        return bytes(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to bytes")


def to_int(value: Any) -> int:
    """Coerce ints and (hex or decimal) strings into ``int``."""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid integer value")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if value.startswith(('0x', '0X')):
            return int(value, 16) if len(value) > 2 else 0
        return int(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to int")


def _first(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


class ContractType(str, Enum):
    """Classification of a well-known address."""
    SYSTEM = "System"
    PRECOMPILE = "Precompile"
    POPULAR = "Popular"
    UNKNOWN = "Unknown"


class ShowCalls(str, Enum):
    """Which calls of the tree are printed."""
    NONE = "none"
    USER = "user"
    SYSTEM = "system"
    ALL = "all"

    @classmethod
    def parse(cls, value: str) -> "ShowCalls":
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid show-calls mode '{value}' (expected one of: {choices})")


class CallType(str, Enum):
    """Kind of frame in the VM call stack."""
    CALL = "Call"
    CALL_CODE = "CallCode"
    DELEGATE_CALL = "DelegateCall"
    STATIC_CALL = "StaticCall"
    MIMIC_CALL = "MimicCall"
    CREATE = "Create"
    CREATE2 = "Create2"
    SELF_DESTRUCT = "SelfDestruct"
    NEAR_CALL = "NearCall"
    # any frame kind the node reports that has no member of its own
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Union[str, "CallType"]) -> "CallType":
        """Map a node's frame type name to a member; unrecognised names map to ``OTHER``."""
        if isinstance(value, CallType):
            return value
        key = ''.join(ch for ch in str(value).lower() if ch.isalnum())
        aliases = {
            'call': cls.CALL,
            'callnormal': cls.CALL,
            'callcode': cls.CALL_CODE,
            'delegatecall': cls.DELEGATE_CALL,
            'calldelegate': cls.DELEGATE_CALL,
            'staticcall': cls.STATIC_CALL,
            'mimiccall': cls.MIMIC_CALL,
            'callmimic': cls.MIMIC_CALL,
            'create': cls.CREATE,
            'create2': cls.CREATE2,
            'selfdestruct': cls.SELF_DESTRUCT,
            'suicide': cls.SELF_DESTRUCT,
            'nearcall': cls.NEAR_CALL,
            'other': cls.OTHER,
        }
        if key not in aliases:
            logger.debug(f"Unrecognised call type {value!r}, shown as {cls.OTHER.value}")
            return cls.OTHER
        return aliases[key]


class StorageLogType(str, Enum):
    READ = "Read"
    INITIAL_WRITE = "InitialWrite"
    REPEATED_WRITE = "RepeatedWrite"

    @classmethod
    def parse(cls, value: Union[str, "StorageLogType"]) -> "StorageLogType":
        if isinstance(value, StorageLogType):
            return value
        key = ''.join(ch for ch in str(value).lower() if ch.isalnum())
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown storage log type: {value}")


@dataclass(frozen=True)
class KnownAddress:
    """An entry of the address map."""
    address: str
    name: str
    contract_type: ContractType


@dataclass
class CallTraceNode:
    """A single frame of the call tree. Children are kept in call order."""
    call_type: CallType
    to: str
    input: bytes = b''
    gas_used: int = 0
    revert_reason: Optional[str] = None
    error: Optional[str] = None
    children: List["CallTraceNode"] = field(default_factory=list)
    from_address: Optional[str] = None
    value: int = 0
    output: bytes = b''

    @property
    def failed(self) -> bool:
        return self.revert_reason is not None or self.error is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CallTraceNode":
        """
        Build a frame from a trace dump or a ``callTracer`` frame.

        A failed deployment has no ``to``; the created address is used when
        reported, else the zero address.
        """
        from_address = _first(data, "from", "from_address")
        to = _first(data, "to", "address", "created")
        return cls(
            call_type=CallType.parse(_first(data, "type", "call_type", default="Call")),
            to=normalize_address(to) if to else ZERO_ADDRESS,
            input=to_bytes(data.get("input")),
            gas_used=to_int(_first(data, "gas_used", "gasUsed", "gas", default=0)),
            revert_reason=_first(data, "revert_reason", "revertReason"),
            error=data.get("error"),
            children=[cls.from_dict(c) for c in _first(data, "calls", "children", default=None) or []],
            from_address=normalize_address(from_address) if from_address else None,
            value=to_int(data.get("value", 0)),
            output=to_bytes(data.get("output")),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "type": self.call_type.value,
            "to": self.to,
            "input": '0x' + self.input.hex(),
            "gas_used": self.gas_used,
            "calls": [c.to_dict() for c in self.children],
        }
        if self.revert_reason is not None:
            result["revert_reason"] = self.revert_reason
        if self.error is not None:
            result["error"] = self.error
        if self.from_address:
            result["from"] = self.from_address
        if self.value:
            result["value"] = self.value
        if self.output:
            result["output"] = '0x' + self.output.hex()
        return result


@dataclass
class EventRecord:
    """An event emitted during execution."""
    address: str
    indexed_topics: List[bytes] = field(default_factory=list)
    data: bytes = b''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventRecord":
        topics = [to_bytes(t) for t in _first(data, "indexed_topics", "topics", default=None) or []]
        for topic in topics:
            if len(topic) != 32:
                raise ValueError(f"Event topic must be 32 bytes, got {len(topic)}")
        return cls(
            address=normalize_address(data["address"]),
            indexed_topics=topics,
            data=to_bytes(data.get("data")),
        )


@dataclass
class StorageLogEntry:
    """A storage slot access. ``written_value`` only matters for writes."""
    log_type: StorageLogType
    address: str
    key: int
    read_value: int
    written_value: int = 0

    @property
    def is_write(self) -> bool:
        return self.log_type != StorageLogType.READ

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StorageLogEntry":
        return cls(
            log_type=StorageLogType.parse(_first(data, "log_type", "type")),
            address=normalize_address(data["address"]),
            key=to_int(data["key"]),
            read_value=to_int(data.get("read_value", 0)),
            written_value=to_int(data.get("written_value", 0)),
        )


@dataclass
class ExecutionSummary:
    cycles_used: int
    computational_gas_used: int
    contracts_used: int
    revert_reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecutionSummary":
        return cls(
            cycles_used=to_int(data.get("cycles_used", 0)),
            computational_gas_used=to_int(data.get("computational_gas_used", 0)),
            contracts_used=to_int(data.get("contracts_used", 0)),
            revert_reason=data.get("revert_reason"),
        )


@dataclass
class ExecutionTrace:
    """Everything recorded for one transaction."""
    call: Optional[CallTraceNode] = None
    events: List[EventRecord] = field(default_factory=list)
    storage_logs: List[StorageLogEntry] = field(default_factory=list)
    summary: Optional[ExecutionSummary] = None
    tx_hash: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "ExecutionTrace":
        """Build a trace, reporting any schema problem as ``TraceFormatError``."""
        if not isinstance(data, dict):
            raise TraceFormatError("Trace must be a JSON object", source=source)
        try:
            call = data.get("call")
            summary = data.get("summary")
            return cls(
                call=CallTraceNode.from_dict(call) if call else None,
                events=[EventRecord.from_dict(e) for e in data.get("events", [])],
                storage_logs=[StorageLogEntry.from_dict(s) for s in data.get("storage_logs", [])],
                summary=ExecutionSummary.from_dict(summary) if summary else None,
                tx_hash=data.get("tx_hash"),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise TraceFormatError(f"Malformed trace: {e}", source=source)
