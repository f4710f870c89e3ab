"""
GovernorBravo (Compound, Uniswap) helpers: reading proposals and building the
storage overrides that make a proposal executable in a simulation.
"""

from typing import Dict, Optional, Sequence

from eth_abi import encode
from eth_utils import keccak, to_bytes, to_hex
from web3 import AsyncWeb3
from web3.contract import AsyncContract

from abi.governor_bravo_abi import BRAVO_TIMELOCK_ABI, GOVERNOR_BRAVO_ABI
from constants.contract_function_selectors import BRAVO_EXECUTE_SIGNATURE
from models.proposal import ProposalActions, ProposalStruct
from utils.abi_utils import encode_function_call
from utils.formatter_utils import to_normalized_address


def get_bravo_governor(w3: AsyncWeb3, address: str) -> AsyncContract:
    return w3.eth.contract(address=to_normalized_address(address), abi=GOVERNOR_BRAVO_ABI)


def get_bravo_timelock(w3: AsyncWeb3, address: str) -> AsyncContract:
    return w3.eth.contract(address=to_normalized_address(address), abi=BRAVO_TIMELOCK_ABI)


async def get_bravo_proposal(governor: AsyncContract, proposal_id: int) -> ProposalStruct:
    (
        id_,
        proposer,
        eta,
        start_block,
        end_block,
        for_votes,
        against_votes,
        abstain_votes,
        canceled,
        executed,
    ) = await governor.functions.proposals(proposal_id).call()
    return ProposalStruct(
        id=id_,
        proposer=proposer,
        eta=eta,
        start_block=start_block,
        end_block=end_block,
        for_votes=for_votes,
        against_votes=against_votes,
        abstain_votes=abstain_votes,
        canceled=canceled,
        executed=executed,
    )


async def get_bravo_actions(governor: AsyncContract, proposal_id: int) -> ProposalActions:
    targets, values, signatures, calldatas = await governor.functions.getActions(proposal_id).call()
    return ProposalActions(
        targets=[to_normalized_address(target) for target in targets],
        values=list(values),
        signatures=list(signatures),
        calldatas=[to_hex(calldata) for calldata in calldatas],
    )


async def next_bravo_proposal_id(governor: AsyncContract) -> int:
    return await governor.functions.proposalCount().call() + 1


def queued_transaction_hash(target: str, value: int, signature: str, data: str, eta: int) -> str:
    """Key of a transaction in the Compound Timelock ``queuedTransactions`` mapping."""
    encoded = encode(
        ["address", "uint256", "string", "bytes", "uint256"],
        [to_normalized_address(target), value, signature, to_bytes(hexstr=data), eta],
    )
    return to_hex(keccak(encoded))


def bravo_execute_calldata(proposal_id: int) -> str:
    return encode_function_call(BRAVO_EXECUTE_SIGNATURE, [proposal_id])


def bravo_proposal_overrides(
    proposal_id: int,
    eta: int,
    for_votes: int,
    start_block: Optional[int] = None,
    end_block: Optional[int] = None,
) -> Dict[str, str]:
    """Marks proposal ``proposal_id`` as passed, not canceled and not executed."""
    prefix = f"proposals[{proposal_id}]"
    overrides = {
        f"{prefix}.eta": str(eta),
        f"{prefix}.canceled": "false",
        f"{prefix}.executed": "false",
        f"{prefix}.forVotes": str(for_votes),
        f"{prefix}.againstVotes": "0",
        f"{prefix}.abstainVotes": "0",
    }
    if start_block is not None:
        overrides[f"{prefix}.startBlock"] = str(start_block)
    if end_block is not None:
        overrides[f"{prefix}.endBlock"] = str(end_block)
    return overrides


def bravo_new_proposal_overrides(
    proposal_id: int,
    proposer: str,
    targets: Sequence[str],
    values: Sequence[int],
    signatures: Sequence[str],
    calldatas: Sequence[str],
    eta: int,
    for_votes: int,
    start_block: int,
    end_block: int,
) -> Dict[str, str]:
    """
    Writes a whole proposal into governor storage, including its action arrays,
    and bumps ``proposalCount`` so ``proposal_id`` is a known proposal.
    """
    prefix = f"proposals[{proposal_id}]"
    overrides = {
        "proposalCount": str(proposal_id),
        f"{prefix}.id": str(proposal_id),
        f"{prefix}.proposer": proposer,
        f"{prefix}.targets.length": str(len(targets)),
        f"{prefix}.values.length": str(len(values)),
        f"{prefix}.signatures.length": str(len(signatures)),
        f"{prefix}.calldatas.length": str(len(calldatas)),
    }
    overrides.update(bravo_proposal_overrides(proposal_id, eta, for_votes, start_block, end_block))
    for i, (target, value, signature, calldata) in enumerate(zip(targets, values, signatures, calldatas)):
        overrides[f"{prefix}.targets[{i}]"] = target
        overrides[f"{prefix}.values[{i}]"] = str(value)
        overrides[f"{prefix}.signatures[{i}]"] = signature
        overrides[f"{prefix}.calldatas[{i}]"] = calldata
    return overrides


def bravo_timelock_overrides(
    targets: Sequence[str],
    values: Sequence[int],
    signatures: Sequence[str],
    calldatas: Sequence[str],
    eta: int,
) -> Dict[str, str]:
    """Queues every action in the Compound Timelock at ``eta``."""
    overrides: Dict[str, str] = {}
    for target, value, signature, calldata in zip(targets, values, signatures, calldatas):
        tx_hash = queued_transaction_hash(target, value, signature, calldata, eta)
        overrides[f"queuedTransactions[{tx_hash}]"] = "true"
    return overrides

