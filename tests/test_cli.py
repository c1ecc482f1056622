import json

import pytest

from vmtrace.cli.main import build_parser, main


def run(capsys, *argv):
    code = main(["--quiet", "--no-color", *argv])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_render_everything(capsys, trace_file):
    code, out, _ = run(
        capsys, "render", str(trace_file),
        "--show-calls", "all", "--show-storage-logs", "--show-vm-details",
    )

    assert code == 0
    lines = out.splitlines()
    assert lines[0].startswith("Transaction: 0x6c1c5f0b")
    assert "Call traces:" in lines
    assert lines[lines.index("Call traces:") + 1].startswith("Call bootloader")
    assert any(line.startswith("    Call ContractDeployer") for line in lines)
    assert any("Revert: insufficient balance" in line for line in lines)
    assert any(line.startswith("L2EthToken") for line in lines)
    assert "Type:           RepeatedWrite" in lines
    assert "Written Value:  0x" + "0" * 63 + "2" in lines
    assert "Cycles Used:          1234" in lines
    assert "Contracts Used:       9" in lines


def test_render_user_mode_hides_system_calls(capsys, trace_file):
    code, out, _ = run(capsys, "render", str(trace_file))

    assert code == 0
    assert "Call bootloader" not in out
    assert "ContractDeployer" not in out
    assert "  Call 0xdeaddeaddeaddeaddeaddeaddeaddeaddeaddead" in out
    assert "  DelegateCall USDC" in out
    assert "Storage logs:" not in out
    assert "VM EXECUTION RESULTS" not in out


def test_render_none_mode_skips_call_section(capsys, trace_file):
    code, out, _ = run(capsys, "render", str(trace_file), "--show-calls", "none")

    assert code == 0
    assert "Call traces:" not in out
    assert "Events:" in out


def test_render_missing_file(capsys, tmp_path):
    code, out, err = run(capsys, "render", str(tmp_path / "missing.json"))

    assert code == 1
    assert out == ""
    assert "Cannot read trace file" in err


def test_render_missing_file_json(capsys, tmp_path):
    code, out, _ = run(capsys, "render", str(tmp_path / "missing.json"), "--json")

    assert code == 1
    assert json.loads(out)["type"] == "TraceFormatError"


def test_render_malformed_trace(capsys, tmp_path):
    path = tmp_path / "trace.json"
    path.write_text(json.dumps({"call": {"type": "Call"}}))

    code, _, err = run(capsys, "render", str(path))

    assert code == 1
    assert "Malformed trace" in err


def test_contracts_json(capsys):
    code, out, _ = run(capsys, "contracts", "--json")

    assert code == 0
    output = json.loads(out)
    assert output["source"] == "builtin"
    assert set(output["modes"]) == {"verify-execute", "estimate-fee", "eth-call"}
    for hashes in output["modes"].values():
        assert hashes["bootloader_hash"].startswith("0x0100")
    assert "deployed" not in output


def test_contracts_deployed(capsys):
    code, out, _ = run(capsys, "contracts", "--json", "--deployed")

    assert code == 0
    names = [c["name"] for c in json.loads(out)["deployed"]]
    assert "ContractDeployer" in names


def test_contracts_text(capsys):
    code, out, _ = run(capsys, "contracts", "--source", "builtin-no-security")

    assert code == 0
    assert "source: builtin-no-security" in out
    assert "eth-call" in out


def test_contracts_local_without_artifacts(capsys, tmp_path):
    code, out, err = run(capsys, "contracts", "--source", "local", "--zksync-home", str(tmp_path))

    assert code == 1
    assert "not found" in err


def test_unknown_show_calls_is_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["render", "trace.json", "--show-calls", "some"])


def test_show_calls_is_case_insensitive(capsys, trace_file):
    assert build_parser().parse_args(["render", "x.json", "--show-calls", "User"]).show_calls == "user"

    code, out, _ = run(capsys, "render", str(trace_file), "--show-calls", "ALL")

    assert code == 0
    assert "Call bootloader" in out


def test_render_log_copies_output(capsys, trace_file, tmp_path):
    render_log = tmp_path / "render.log"

    code, out, _ = run(capsys, "--render-log", str(render_log), "render", str(trace_file))

    assert code == 0
    assert render_log.read_text() == out
    assert "Call traces:" in out
