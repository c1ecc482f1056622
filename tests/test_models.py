import json

import pytest

from vmtrace.config import Config
from vmtrace.models import (
    CallTraceNode,
    CallType,
    EventRecord,
    ExecutionTrace,
    ShowCalls,
    StorageLogEntry,
    StorageLogType,
    normalize_address,
)
from vmtrace.utils.exceptions import TraceFormatError

from conftest import USER_ADDR


def test_call_from_node_json():
    call = CallTraceNode.from_dict({
        "type": "CALL",
        "from": "0x" + "AB" * 20,
        "to": USER_ADDR.upper().replace("0X", "0x"),
        "input": "0xa9059cbb",
        "gasUsed": "0x10",
        "value": "0x0",
        "error": "execution reverted",
        "revertReason": "nope",
        "calls": [{"type": "DELEGATECALL", "to": USER_ADDR}],
    })

    assert call.call_type == CallType.CALL
    assert call.to == USER_ADDR
    assert call.from_address == "0x" + "ab" * 20
    assert call.input == bytes.fromhex("a9059cbb")
    assert call.gas_used == 16
    assert call.revert_reason == "nope"
    assert call.failed
    assert call.children[0].call_type == CallType.DELEGATE_CALL
    assert call.children[0].children == []


def test_call_round_trips_through_dict():
    call = CallTraceNode(CallType.STATIC_CALL, USER_ADDR, b"\x01\x02", 7, children=[
        CallTraceNode(CallType.CALL, USER_ADDR),
    ])

    assert CallTraceNode.from_dict(call.to_dict()) == call


def test_successful_call_is_not_failed():
    assert not CallTraceNode(CallType.CALL, USER_ADDR).failed


@pytest.mark.parametrize("raw,expected", [
    ("Call", CallType.CALL),
    ("call", CallType.CALL),
    ("CallNormal", CallType.CALL),
    ("DELEGATECALL", CallType.DELEGATE_CALL),
    ("static_call", CallType.STATIC_CALL),
    ("CALLCODE", CallType.CALL_CODE),
    ("SELFDESTRUCT", CallType.SELF_DESTRUCT),
    ("INVALID", CallType.OTHER),
    ("Mimic", CallType.OTHER),
    ("CallMimic", CallType.MIMIC_CALL),
    ("CREATE2", CallType.CREATE2),
    ("NearCall", CallType.NEAR_CALL),
])
def test_call_type_parse(raw, expected):
    assert CallType.parse(raw) == expected


def test_trace_keeps_every_call_tracer_frame():
    trace = ExecutionTrace.from_dict({"call": {
        "type": "CALL",
        "to": USER_ADDR,
        "calls": [
            {"type": "CALLCODE", "to": USER_ADDR, "input": "0x12345678"},
            {"type": "SELFDESTRUCT", "to": "0x" + "11" * 20, "value": "0x1"},
            {"type": "INVALID", "to": USER_ADDR, "error": "invalid opcode: INVALID"},
            {"type": "TELEPORT", "to": USER_ADDR},
        ],
    }})

    assert [c.call_type for c in trace.call.children] == [
        CallType.CALL_CODE, CallType.SELF_DESTRUCT, CallType.OTHER, CallType.OTHER,
    ]
    assert trace.call.children[2].failed


def test_failed_create_without_target():
    call = CallTraceNode.from_dict({"type": "CREATE", "input": "0x6080", "error": "out of gas"})

    assert call.call_type == CallType.CREATE
    assert call.to == "0x" + "00" * 20
    assert call.error == "out of gas"


def test_create_uses_reported_address():
    call = CallTraceNode.from_dict({"type": "CREATE2", "to": None, "address": USER_ADDR})

    assert call.to == USER_ADDR


def test_empty_revert_reason_still_fails():
    call = CallTraceNode.from_dict({"type": "Call", "to": USER_ADDR, "revert_reason": ""})
    summary = ExecutionTrace.from_dict({"summary": {"cycles_used": 1, "revert_reason": ""}}).summary

    assert call.revert_reason == ""
    assert call.failed
    assert summary.revert_reason == ""


def test_show_calls_parse():
    assert ShowCalls.parse(" System ") == ShowCalls.SYSTEM
    with pytest.raises(ValueError, match="expected one of"):
        ShowCalls.parse("everything")


def test_storage_log_type_parse():
    assert StorageLogType.parse("initial_write") == StorageLogType.INITIAL_WRITE
    assert StorageLogType.parse("read") == StorageLogType.READ
    with pytest.raises(ValueError):
        StorageLogType.parse("delete")


def test_storage_entry_values():
    entry = StorageLogEntry.from_dict({
        "type": "InitialWrite", "address": USER_ADDR, "key": "0xff", "read_value": "0", "written_value": 3,
    })

    assert entry.is_write
    assert entry.key == 255
    assert entry.read_value == 0
    assert entry.written_value == 3


def test_event_topics_must_be_words():
    with pytest.raises(ValueError):
        EventRecord.from_dict({"address": USER_ADDR, "topics": ["0x01"]})


def test_event_accepts_receipt_shape():
    event = EventRecord.from_dict({"address": USER_ADDR, "topics": [b"\x00" * 32], "data": "0x0102"})

    assert event.indexed_topics == [b"\x00" * 32]
    assert event.data == b"\x01\x02"


def test_address_normalization():
    assert normalize_address(bytes.fromhex(USER_ADDR[2:])) == USER_ADDR
    assert normalize_address(USER_ADDR[2:]) == USER_ADDR
    with pytest.raises(ValueError):
        normalize_address(b"\x00" * 19)


def test_trace_from_fixture(trace_file):
    trace = ExecutionTrace.from_dict(json.loads(trace_file.read_text()))

    assert trace.call.to == "0x0000000000000000000000000000000000008001"
    assert [c.gas_used for c in trace.call.children] == [500, 30]
    assert len(trace.events) == 1
    assert [s.log_type for s in trace.storage_logs] == [StorageLogType.READ, StorageLogType.REPEATED_WRITE]
    assert trace.summary.cycles_used == 1234
    assert trace.summary.revert_reason is None


@pytest.mark.parametrize("data", [
    [],
    {"call": {"to": "0x1234"}},
    {"events": [{"topics": []}]},
    {"storage_logs": [{"log_type": "Read", "address": USER_ADDR}]},
])
def test_malformed_trace(data):
    with pytest.raises(TraceFormatError) as exc_info:
        ExecutionTrace.from_dict(data, source="dump.json")
    assert exc_info.value.details["source"] == "dump.json"


def test_config_from_env(tmp_path):
    config = Config.from_env({
        "ZKSYNC_HOME": str(tmp_path),
        "RPC_URL": "http://node:3050",
        "VMTRACE_RESOLVER_TIMEOUT": "2.5",
        "NO_COLOR": "1",
    })

    assert config.zksync_home == tmp_path
    assert config.rpc_url == "http://node:3050"
    assert config.resolver_timeout == 2.5
    assert not config.use_colors


def test_config_invalid_timeout():
    with pytest.raises(ValueError):
        Config.from_env({"VMTRACE_RESOLVER_TIMEOUT": "soon"})


def test_config_overrides_skip_none(tmp_path):
    config = Config(rpc_url="http://a").with_overrides(rpc_url=None, zksync_home=str(tmp_path))

    assert config.rpc_url == "http://a"
    assert config.zksync_home == tmp_path
