"""
Contracts command implementation.

Builds the system contracts for a bytecode source and prints the bootloader
and default account hash used for every execution mode. The command fails
when any artifact is missing, mirroring a node that refuses to start with a
partial contract set.
"""

import json

from vmtrace.cli.common import build_config, handle_command_error
from vmtrace.core.bytecode import hash_bytecode
from vmtrace.core.system_contracts import (
    BytecodeSource,
    SystemContracts,
    TxExecutionMode,
    get_deployed_contracts,
)
from vmtrace.utils.colors import bold, dim, info
from vmtrace.utils.exceptions import VmtraceError


def _hex(value: bytes) -> str:
    return '0x' + value.hex()


def list_contracts_command(args) -> int:
    """
    Execute the contracts command.

    Args:
        args: Parsed command arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    json_mode = getattr(args, 'json', False)
    try:
        config = build_config(args)
        source = BytecodeSource(args.source)
        contracts = SystemContracts.from_options(source, config)
        deployed = get_deployed_contracts(source, config) if args.deployed else []
    except (VmtraceError, ValueError) as e:
        return handle_command_error(e, json_mode)

    modes = {}
    for mode in TxExecutionMode:
        bundle = contracts.contracts(mode)
        modes[mode.value] = {
            "bootloader_hash": _hex(bundle.bootloader_hash),
            "default_account_hash": _hex(bundle.default_account_hash),
        }

    if json_mode:
        output = {"source": source.value, "modes": modes}
        if args.deployed:
            output["deployed"] = [
                {"name": c.name, "address": c.address, "hash": _hex(hash_bytecode(c.bytecode, c.name))}
                for c in deployed
            ]
        print(json.dumps(output, indent=2))
        return 0

    print(f"{bold('System contracts')} {dim(f'(source: {source.value})')}")
    for mode, hashes in modes.items():
        print(f"  {info(mode)}")
        print(f"    {'bootloader:':<17} {hashes['bootloader_hash']}")
        print(f"    {'default account:':<17} {hashes['default_account_hash']}")

    if args.deployed:
        print(f"\n{bold('Deployed at genesis:')}")
        for contract in deployed:
            print(f"  {contract.address} {contract.name:<20} {_hex(hash_bytecode(contract.bytecode, contract.name))}")
    return 0
