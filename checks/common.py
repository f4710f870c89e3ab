"""
Helpers shared by the proposal checks.
"""

from typing import Any, Iterable, List, Optional, Union

from web3 import AsyncWeb3

from models.tenderly import Input, TenderlySimulation
from utils.bytecode_utils import find_opcodes
from utils.formatter_utils import to_normalized_address

BlockIdentifier = Union[int, str]

# Verification
VERIFIED = "verified"
UNVERIFIED = "unverified"
EOA = "eoa"

# Bytecode inspection
TRUSTED = "trusted"
EMPTY = "empty"
SAFE = "safe"
HAS_DELEGATECALL = "delegatecall"
HAS_SELFDESTRUCT = "selfdestruct"


def sim_block(sim: TenderlySimulation) -> BlockIdentifier:
    return sim.transaction.block_number if sim.transaction.block_number is not None else "latest"


def contract_label(sim: TenderlySimulation, address: str) -> str:
    contract = sim.contract_at(address)
    if contract is not None and contract.contract_name:
        return f"{contract.contract_name} at `{contract.address}`"
    return f"`{to_normalized_address(address)}`"


def unique_addresses(addresses: Iterable[str]) -> List[str]:
    seen = []
    for address in addresses:
        address = to_normalized_address(address)
        if address not in seen:
            seen.append(address)
    return seen


async def verification_status(sim: TenderlySimulation, address: str, w3: AsyncWeb3) -> str:
    """
    Tenderly only lists verified contracts, so anything with code that is
    missing from ``sim.contracts`` is unverified.
    """
    if sim.contract_at(address) is not None:
        return VERIFIED
    code = await w3.eth.get_code(to_normalized_address(address), block_identifier=sim_block(sim))
    return UNVERIFIED if code else EOA


async def bytecode_status(
    address: str, w3: AsyncWeb3, trusted_addresses: Iterable[str], block: BlockIdentifier = "latest"
) -> str:
    address = to_normalized_address(address)
    if address in {to_normalized_address(trusted) for trusted in trusted_addresses}:
        return TRUSTED

    code = await w3.eth.get_code(address, block_identifier=block)
    if not code:
        nonce = await w3.eth.get_transaction_count(address, block_identifier=block)
        return EOA if nonce > 0 else EMPTY

    opcodes = find_opcodes(bytes(code), ("SELFDESTRUCT", "DELEGATECALL"))
    if "SELFDESTRUCT" in opcodes:
        return HAS_SELFDESTRUCT
    if "DELEGATECALL" in opcodes:
        return HAS_DELEGATECALL
    return SAFE


def format_value(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{key}: {format_value(item)}" for key, item in value.items()) + "}"
    return str(value)


def format_inputs(inputs: Optional[List[Input]]) -> str:
    parts = []
    for arg in inputs or []:
        name = arg.soltype.name if arg.soltype is not None and arg.soltype.name else ""
        parts.append(f"{name}: {format_value(arg.value)}" if name else format_value(arg.value))
    return ", ".join(parts)
