import json

import pytest

from vmtrace.config import Config
from vmtrace.core import system_contracts
from vmtrace.core.bytecode import hash_bytecode
from vmtrace.core.system_contracts import (
    SYSTEM_CONTRACTS,
    BytecodeSource,
    SystemContracts,
    TxExecutionMode,
    get_deployed_contracts,
)
from vmtrace.utils.exceptions import (
    ArtifactNotFoundError,
    InvalidBytecodeError,
    SystemContractsError,
)

BOOTLOADERS = {
    "proved_block": b"\x01" * 32,
    "playground_block": b"\x02" * 32,
    "fee_estimate": b"\x03" * 32,
}
DEFAULT_ACCOUNT_CODE = b"\xaa" * 96


def write_local_home(home, bootloaders=BOOTLOADERS, default_account=DEFAULT_ACCOUNT_CODE):
    """Lay out compiled artifacts the way a system-contracts checkout does."""
    for name, code in bootloaders.items():
        path = home / "etc/system-contracts/bootloader/build/artifacts" / f"{name}.yul"
        path.mkdir(parents=True, exist_ok=True)
        (path / f"{name}.yul.zbin").write_bytes(code)

    sol_root = home / "etc/system-contracts/artifacts-zk/cache-zk/solpp-generated-contracts"
    account = sol_root / "DefaultAccount.sol"
    account.mkdir(parents=True, exist_ok=True)
    (account / "DefaultAccount.json").write_text(
        json.dumps({"contractName": "DefaultAccount", "bytecode": "0x" + default_account.hex()})
    )
    return home


@pytest.fixture(scope="module")
def builtin():
    return SystemContracts.from_options(BytecodeSource.BUILT_IN, Config())


def test_mode_selects_bundle(builtin):
    assert builtin.contracts(TxExecutionMode.VERIFY_EXECUTE) is builtin.baseline_contracts
    assert builtin.contracts(TxExecutionMode.ESTIMATE_FEE) is builtin.fee_estimate_contracts
    assert builtin.contracts(TxExecutionMode.ETH_CALL) is builtin.playground_contracts
    assert builtin.contracts_for_l2_call() is builtin.playground_contracts
    assert builtin.contracts_for_fee_estimate() is builtin.fee_estimate_contracts


def test_selection_is_stable(builtin):
    first = builtin.contracts(TxExecutionMode.ETH_CALL)
    assert builtin.contracts(TxExecutionMode.ETH_CALL) is first


def test_unknown_mode_is_rejected(builtin):
    with pytest.raises(ValueError):
        builtin.contracts("replay")


def test_bundles_differ_only_by_bootloader(builtin):
    bundles = [builtin.baseline_contracts, builtin.playground_contracts, builtin.fee_estimate_contracts]

    assert len({b.bootloader_hash for b in bundles}) == 3
    assert len({b.default_account_hash for b in bundles}) == 1


def test_hashes_match_code(builtin):
    bundle = builtin.baseline_contracts

    assert bundle.bootloader_hash == hash_bytecode(bundle.bootloader_code)
    assert bundle.default_account_hash == hash_bytecode(bundle.default_account_code)
    assert len(bundle.bootloader.words) == len(bundle.bootloader_code) // 32


def test_builtin_without_security_swaps_default_account(builtin):
    relaxed = SystemContracts.from_options(BytecodeSource.BUILT_IN_WITHOUT_SECURITY, Config())

    assert relaxed.baseline_contracts.bootloader_hash == builtin.baseline_contracts.bootloader_hash
    assert relaxed.baseline_contracts.default_account_hash != builtin.baseline_contracts.default_account_hash


def test_default_uses_builtin(builtin):
    assert SystemContracts.default() == builtin


def test_local_source(tmp_path):
    home = write_local_home(tmp_path)

    contracts = SystemContracts.from_options(BytecodeSource.LOCAL, Config(zksync_home=home))

    assert contracts.baseline_contracts.bootloader_code == BOOTLOADERS["proved_block"]
    assert contracts.playground_contracts.bootloader_code == BOOTLOADERS["playground_block"]
    assert contracts.fee_estimate_contracts.bootloader_code == BOOTLOADERS["fee_estimate"]
    assert contracts.baseline_contracts.default_account_code == DEFAULT_ACCOUNT_CODE
    assert contracts.baseline_contracts.default_account_hash == hash_bytecode(DEFAULT_ACCOUNT_CODE)


def test_local_missing_artifact(tmp_path):
    bootloaders = dict(BOOTLOADERS)
    del bootloaders["fee_estimate"]
    home = write_local_home(tmp_path, bootloaders=bootloaders)

    with pytest.raises(ArtifactNotFoundError) as exc_info:
        SystemContracts.from_options(BytecodeSource.LOCAL, Config(zksync_home=home))
    assert exc_info.value.details["contract"] == "fee_estimate"


def test_local_empty_home(tmp_path):
    with pytest.raises(ArtifactNotFoundError):
        SystemContracts.from_options(BytecodeSource.LOCAL, Config(zksync_home=tmp_path))


def test_local_even_word_count(tmp_path):
    home = write_local_home(tmp_path, default_account=b"\xaa" * 64)

    with pytest.raises(InvalidBytecodeError) as exc_info:
        SystemContracts.from_options(BytecodeSource.LOCAL, Config(zksync_home=home))
    assert exc_info.value.details["contract"] == "DefaultAccount"


def test_corrupted_builtin_is_internal_error(monkeypatch):
    monkeypatch.setattr(system_contracts, "builtin_bootloader_bytecode", lambda name: b"\x00" * 31)

    with pytest.raises(SystemContractsError) as exc_info:
        SystemContracts.from_options(BytecodeSource.BUILT_IN, Config())

    assert type(exc_info.value) is SystemContractsError
    assert exc_info.value.details["internal"] is True
    assert "corrupted" in exc_info.value.message


def test_deployed_contracts_builtin():
    deployed = get_deployed_contracts(BytecodeSource.BUILT_IN, Config())

    assert len(deployed) == len(SYSTEM_CONTRACTS)
    by_address = {c.address: c for c in deployed}
    assert by_address["0x0000000000000000000000000000000000008006"].name == "ContractDeployer"
    assert by_address["0x0000000000000000000000000000000000000001"].name == "Ecrecover"
    for contract in deployed:
        hash_bytecode(contract.bytecode)


def test_deployed_contracts_local_missing(tmp_path):
    with pytest.raises(ArtifactNotFoundError):
        get_deployed_contracts(BytecodeSource.LOCAL, Config(zksync_home=tmp_path))


@pytest.mark.parametrize("source,name", [
    (BytecodeSource.BUILT_IN, "DefaultAccount"),
    (BytecodeSource.BUILT_IN_WITHOUT_SECURITY, "DefaultAccountNoSecurity"),
])
def test_default_account_name_follows_source(monkeypatch, source, name):
    real = system_contracts.builtin_contract_bytecode

    def corrupt_default_account(contract, language=system_contracts.ContractLanguage.SOL):
        if contract == name:
            return b"\x00" * 64
        return real(contract, language)

    monkeypatch.setattr(system_contracts, "builtin_contract_bytecode", corrupt_default_account)

    with pytest.raises(SystemContractsError) as exc_info:
        SystemContracts.from_options(source, Config())
    assert exc_info.value.details["contract"] == name
