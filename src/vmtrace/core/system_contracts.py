"""
System contracts (bootloader + default account) used by the node.

Three bundles are built once at startup from a single ``BytecodeSource``:

- baseline: the proved-block bootloader, which performs every check
- playground: used for read-only ``eth_call`` requests
- fee estimate: used for ``eth_estimateGas``

``SystemContracts.contracts`` then picks one per execution intent; callers
never look at the bytecode source again.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..config import Config
from ..models import normalize_address
from ..utils.exceptions import SystemContractsError
from ..utils.logging import get_logger
from .bytecode import (
    ContractLanguage,
    builtin_bootloader_bytecode,
    builtin_contract_bytecode,
    bytes_to_be_words,
    hash_bytecode,
    read_bootloader_bytecode,
    read_sys_contract_bytecode,
)

logger = get_logger('system_contracts')

PROVED_BLOCK_BOOTLOADER = "proved_block"
PLAYGROUND_BOOTLOADER = "playground_block"
FEE_ESTIMATE_BOOTLOADER = "fee_estimate"

DEFAULT_ACCOUNT = "DefaultAccount"
DEFAULT_ACCOUNT_NO_SECURITY = "DefaultAccountNoSecurity"


class BytecodeSource(str, Enum):
    """Where system contract bytecode is loaded from."""
    # Use the packaged contracts
    BUILT_IN = "builtin"
    # Load the contracts bytecode at runtime from ZKSYNC_HOME
    LOCAL = "local"
    # Packaged contracts without signature verification (test harnesses only)
    BUILT_IN_WITHOUT_SECURITY = "builtin-no-security"


class TxExecutionMode(str, Enum):
    """Purpose a transaction is executed for."""
    VERIFY_EXECUTE = "verify-execute"
    ESTIMATE_FEE = "estimate-fee"
    ETH_CALL = "eth-call"


@dataclass(frozen=True)
class SystemContractCode:
    code: bytes
    hash: bytes

    @classmethod
    def from_bytecode(cls, code: bytes, name: str = None) -> "SystemContractCode":
        return cls(code=bytes(code), hash=hash_bytecode(code, contract=name))

    @property
    def words(self) -> List[int]:
        return bytes_to_be_words(self.code)


@dataclass(frozen=True)
class BaseSystemContracts:
    """A bootloader program paired with the default account program."""
    bootloader: SystemContractCode
    default_account: SystemContractCode

    @property
    def bootloader_code(self) -> bytes:
        return self.bootloader.code

    @property
    def bootloader_hash(self) -> bytes:
        return self.bootloader.hash

    @property
    def default_account_code(self) -> bytes:
        return self.default_account.code

    @property
    def default_account_hash(self) -> bytes:
        return self.default_account.hash


@dataclass(frozen=True)
class DeployedContract:
    address: str
    name: str
    bytecode: bytes


# (name, address, directory, language) of the contracts deployed at genesis
SYSTEM_CONTRACTS = [
    ("EmptyContract", "0x0000000000000000000000000000000000000000", "", ContractLanguage.SOL),
    ("Ecrecover", "0x0000000000000000000000000000000000000001", "precompiles/", ContractLanguage.YUL),
    ("SHA256", "0x0000000000000000000000000000000000000002", "precompiles/", ContractLanguage.YUL),
    ("EmptyContract", "0x0000000000000000000000000000000000008001", "", ContractLanguage.SOL),
    ("AccountCodeStorage", "0x0000000000000000000000000000000000008002", "", ContractLanguage.SOL),
    ("NonceHolder", "0x0000000000000000000000000000000000008003", "", ContractLanguage.SOL),
    ("KnownCodesStorage", "0x0000000000000000000000000000000000008004", "", ContractLanguage.SOL),
    ("ImmutableSimulator", "0x0000000000000000000000000000000000008005", "", ContractLanguage.SOL),
    ("ContractDeployer", "0x0000000000000000000000000000000000008006", "", ContractLanguage.SOL),
    ("L1Messenger", "0x0000000000000000000000000000000000008008", "", ContractLanguage.SOL),
    ("MsgValueSimulator", "0x0000000000000000000000000000000000008009", "", ContractLanguage.SOL),
    ("L2EthToken", "0x000000000000000000000000000000000000800a", "", ContractLanguage.SOL),
    ("SystemContext", "0x000000000000000000000000000000000000800b", "", ContractLanguage.SOL),
    ("BootloaderUtilities", "0x000000000000000000000000000000000000800c", "", ContractLanguage.SOL),
    ("EventWriter", "0x000000000000000000000000000000000000800d", "", ContractLanguage.YUL),
    ("BytecodeCompressor", "0x000000000000000000000000000000000000800e", "", ContractLanguage.SOL),
    ("Keccak256", "0x0000000000000000000000000000000000008010", "precompiles/", ContractLanguage.YUL),
    ("Console", "0x000000000000000000636f6e736f6c652e6c6f67", "", ContractLanguage.SOL),
]


class _ArtifactLoader:
    """Reads bootloaders and contracts for one ``BytecodeSource``."""

    def __init__(self, source: BytecodeSource, home: Path):
        self.source = source
        self.home = home

    @property
    def local(self) -> bool:
        return self.source == BytecodeSource.LOCAL

    def bootloader(self, name: str) -> bytes:
        if self.local:
            return read_bootloader_bytecode(self.home, name)
        return builtin_bootloader_bytecode(name)

    def contract(self, name: str, directory: str = "", language: ContractLanguage = ContractLanguage.SOL) -> bytes:
        if self.local:
            return read_sys_contract_bytecode(self.home, directory, name, language)
        return builtin_contract_bytecode(name, language)

    def default_account(self) -> Tuple[str, bytes]:
        """Name and code of the default account program for this source."""
        name = DEFAULT_ACCOUNT
        if self.source == BytecodeSource.BUILT_IN_WITHOUT_SECURITY:
            name = DEFAULT_ACCOUNT_NO_SECURITY
        return name, self.contract(name)


def _guard(source: BytecodeSource, build: Callable):
    """Run a loading step, reporting packaged-artifact failures as corruption."""
    try:
        return build()
    except SystemContractsError as e:
        if source == BytecodeSource.LOCAL:
            raise
        raise SystemContractsError(
            f"Packaged system contracts are corrupted: {e.message}",
            internal=True,
            **e.details,
        ) from e


def bsc_load_with_bootloader(bootloader_bytecode: bytes, loader: _ArtifactLoader) -> BaseSystemContracts:
    """Pair a bootloader with the default account program of ``loader``'s source."""
    default_account_name, default_account_code = loader.default_account()
    return BaseSystemContracts(
        bootloader=SystemContractCode.from_bytecode(bootloader_bytecode, "bootloader"),
        default_account=SystemContractCode.from_bytecode(default_account_code, default_account_name),
    )


def baseline_contracts(loader: _ArtifactLoader) -> BaseSystemContracts:
    """Proved-block bootloader: the 'real' contracts that do all the checks."""
    return bsc_load_with_bootloader(loader.bootloader(PROVED_BLOCK_BOOTLOADER), loader)


def playground(loader: _ArtifactLoader) -> BaseSystemContracts:
    """Playground bootloader, used for handling 'eth_call'."""
    return bsc_load_with_bootloader(loader.bootloader(PLAYGROUND_BOOTLOADER), loader)


def fee_estimate_contracts(loader: _ArtifactLoader) -> BaseSystemContracts:
    """Fee-estimate bootloader, used for handling 'eth_estimateGas'."""
    return bsc_load_with_bootloader(loader.bootloader(FEE_ESTIMATE_BOOTLOADER), loader)


@dataclass(frozen=True)
class SystemContracts:
    """Holds the system contracts (and bootloader) used by the node."""
    baseline_contracts: BaseSystemContracts
    playground_contracts: BaseSystemContracts
    fee_estimate_contracts: BaseSystemContracts

    @classmethod
    def from_options(cls, source: BytecodeSource, config: Optional[Config] = None) -> "SystemContracts":
        """
        Build the three bundles for ``source``.

        Raises:
            ArtifactNotFoundError: a local artifact is missing or unreadable
            InvalidBytecodeError: a local artifact has invalid bytecode
            SystemContractsError: packaged artifacts are corrupted
        """
        config = config or Config.from_env()
        loader = _ArtifactLoader(source, config.zksync_home)
        logger.debug(f"Loading system contracts from {source.value}")

        contracts = _guard(source, lambda: cls(
            baseline_contracts=baseline_contracts(loader),
            playground_contracts=playground(loader),
            fee_estimate_contracts=fee_estimate_contracts(loader),
        ))
        logger.debug(
            f"Default account hash 0x{contracts.baseline_contracts.default_account_hash.hex()}"
        )
        return contracts

    @classmethod
    def default(cls) -> "SystemContracts":
        """System contracts built from the packaged artifacts."""
        return cls.from_options(BytecodeSource.BUILT_IN)

    def contracts(self, execution_mode: TxExecutionMode) -> BaseSystemContracts:
        if execution_mode == TxExecutionMode.VERIFY_EXECUTE:
            return self.baseline_contracts
        # Ignore invalid signatures: these requests often come unsigned and
        # keep changing the gas limit.
        if execution_mode == TxExecutionMode.ESTIMATE_FEE:
            return self.fee_estimate_contracts
        # Read-only call: no signature checks, lower fixed gas limit.
        if execution_mode == TxExecutionMode.ETH_CALL:
            return self.playground_contracts
        raise ValueError(f"Unknown execution mode: {execution_mode}")

    def contracts_for_l2_call(self) -> BaseSystemContracts:
        return self.contracts(TxExecutionMode.ETH_CALL)

    def contracts_for_fee_estimate(self) -> BaseSystemContracts:
        return self.contracts(TxExecutionMode.ESTIMATE_FEE)


def get_deployed_contracts(source: BytecodeSource, config: Optional[Config] = None) -> List[DeployedContract]:
    """System contracts deployed at genesis, read from the same place as the bundles."""
    config = config or Config.from_env()
    loader = _ArtifactLoader(source, config.zksync_home)

    def build() -> List[DeployedContract]:
        deployed = []
        for name, address, directory, language in SYSTEM_CONTRACTS:
            bytecode = loader.contract(name, directory, language)
            hash_bytecode(bytecode, contract=name)
            deployed.append(DeployedContract(normalize_address(address), name, bytecode))
        return deployed

    return _guard(source, build)
