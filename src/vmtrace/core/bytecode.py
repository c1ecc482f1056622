"""
Bytecode hashing and artifact loading.

Artifacts come either from the copies packaged under ``vmtrace/data/contracts``
or from a local system-contracts checkout rooted at ``ZKSYNC_HOME``.
Solidity contracts are stored as compiler JSON artifacts with a ``bytecode``
field; Yul programs (bootloaders, precompiles) as raw ``.zbin`` files.
"""

import hashlib
import json
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import List

from eth_utils import decode_hex

from ..utils.exceptions import ArtifactNotFoundError, InvalidBytecodeError
from ..utils.logging import get_logger

logger = get_logger('bytecode')

WORD_SIZE = 32
BYTECODE_HASH_VERSION = 1
MAX_BYTECODE_WORDS = 2 ** 16

SOL_ARTIFACTS_DIR = "etc/system-contracts/artifacts-zk/cache-zk/solpp-generated-contracts"
YUL_ARTIFACTS_DIR = "etc/system-contracts/contracts"
BOOTLOADER_ARTIFACTS_DIR = "etc/system-contracts/bootloader/build/artifacts"


class ContractLanguage(str, Enum):
    SOL = "sol"
    YUL = "yul"


def hash_bytecode(code: bytes, contract: str = None) -> bytes:
    """
    Versioned content hash of a bytecode blob.

    The hash is sha256 of the code with the first four bytes replaced by the
    version byte, a zero byte and the code length in 32-byte words
    (big-endian).

    Raises:
        InvalidBytecodeError: if the code is not a whole, odd number of words
            or is too long
    """
    if len(code) % WORD_SIZE != 0:
        raise InvalidBytecodeError(
            f"length {len(code)} is not divisible by {WORD_SIZE}", contract=contract
        )
    words = len(code) // WORD_SIZE
    if words % 2 == 0:
        raise InvalidBytecodeError(f"{words} words; the word count must be odd", contract=contract)
    if words >= MAX_BYTECODE_WORDS:
        raise InvalidBytecodeError(f"{words} words exceeds the maximum", contract=contract)

    digest = bytearray(hashlib.sha256(code).digest())
    digest[0] = BYTECODE_HASH_VERSION
    digest[1] = 0
    digest[2:4] = words.to_bytes(2, 'big')
    return bytes(digest)


def bytes_to_be_words(code: bytes) -> List[int]:
    """Split code into 256-bit big-endian words."""
    if len(code) % WORD_SIZE != 0:
        raise InvalidBytecodeError(f"length {len(code)} is not divisible by {WORD_SIZE}")
    return [
        int.from_bytes(code[i:i + WORD_SIZE], 'big')
        for i in range(0, len(code), WORD_SIZE)
    ]


def bytecode_from_artifact(name: str, raw: bytes) -> bytes:
    """Extract the ``bytecode`` field of a JSON compiler artifact."""
    try:
        artifact = json.loads(raw)
        bytecode = artifact["bytecode"]
        if isinstance(bytecode, dict):
            bytecode = bytecode["object"]
        return decode_hex(bytecode)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidBytecodeError(f"malformed artifact ({e})", contract=name)


def _read_file(name: str, path: Path) -> bytes:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ArtifactNotFoundError(name, str(path), reason=e.strerror)
    logger.debug(f"Read {len(data)} bytes for {name} from {path}")
    return data


# Packaged artifacts

def read_builtin_artifact(filename: str) -> bytes:
    """Read a file packaged under ``vmtrace/data/contracts``."""
    resource = resources.files("vmtrace.data.contracts").joinpath(filename)
    try:
        return resource.read_bytes()
    except OSError as e:
        raise ArtifactNotFoundError(filename, f"vmtrace/data/contracts/{filename}", reason=str(e))


def builtin_contract_bytecode(name: str, language: ContractLanguage = ContractLanguage.SOL) -> bytes:
    if language == ContractLanguage.SOL:
        return bytecode_from_artifact(name, read_builtin_artifact(f"{name}.json"))
    return read_builtin_artifact(f"{name}.yul.zbin")


def builtin_bootloader_bytecode(name: str) -> bytes:
    return read_builtin_artifact(f"{name}.yul.zbin")


# Local artifacts

def read_sys_contract_bytecode(
    home: Path,
    directory: str,
    name: str,
    language: ContractLanguage,
) -> bytes:
    """
    Read a system contract compiled inside a system-contracts checkout.

    Args:
        home: Checkout root (``ZKSYNC_HOME``)
        directory: Sub-directory of the contract, e.g. ``"precompiles/"``
        name: Contract name
        language: Source language, which decides the artifact layout
    """
    home = Path(home)
    if language == ContractLanguage.SOL:
        path = home / SOL_ARTIFACTS_DIR / f"{directory}{name}.sol" / f"{name}.json"
        return bytecode_from_artifact(name, _read_file(name, path))
    path = home / YUL_ARTIFACTS_DIR / f"{directory}artifacts" / f"{name}.yul" / f"{name}.yul.zbin"
    return _read_file(name, path)


def read_bootloader_bytecode(home: Path, name: str) -> bytes:
    """Read a compiled bootloader program (``proved_block``, ``playground_block``, ...)."""
    path = Path(home) / BOOTLOADER_ARTIFACTS_DIR / f"{name}.yul" / f"{name}.yul.zbin"
    return _read_file(name, path)
