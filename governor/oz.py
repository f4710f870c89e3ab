"""
OpenZeppelin Governor helpers, also used for the Arbitrum governors, which are
OZ governors with a TimelockController.
"""

from typing import Dict, Sequence

from eth_abi import encode
from eth_utils import keccak, to_bytes, to_hex
from web3 import AsyncWeb3
from web3.contract import AsyncContract

from abi.governor_oz_abi import GOVERNOR_OZ_ABI, TIMELOCK_CONTROLLER_ABI
from constants.contract_function_selectors import OZ_EXECUTE_SIGNATURE, TIMELOCK_EXECUTE_BATCH_SIGNATURE
from models.proposal import ProposalState, ProposalStruct
from utils.abi_utils import encode_function_call
from utils.formatter_utils import ZERO_BYTES32, to_normalized_address


def get_oz_governor(w3: AsyncWeb3, address: str) -> AsyncContract:
    return w3.eth.contract(address=to_normalized_address(address), abi=GOVERNOR_OZ_ABI)


def get_timelock_controller(w3: AsyncWeb3, address: str) -> AsyncContract:
    return w3.eth.contract(address=to_normalized_address(address), abi=TIMELOCK_CONTROLLER_ABI)


def description_hash(description: str) -> str:
    return to_hex(keccak(text=description))


def _bytes_list(calldatas: Sequence[str]):
    return [to_bytes(hexstr=calldata) for calldata in calldatas]


def hash_proposal(
    targets: Sequence[str],
    values: Sequence[int],
    calldatas: Sequence[str],
    description: str,
) -> int:
    """``uint256(keccak256(abi.encode(targets, values, calldatas, descriptionHash)))``"""
    encoded = encode(
        ["address[]", "uint256[]", "bytes[]", "bytes32"],
        [
            [to_normalized_address(target) for target in targets],
            list(values),
            _bytes_list(calldatas),
            keccak(text=description),
        ],
    )
    return int.from_bytes(keccak(encoded), "big")


def hash_operation_batch(
    targets: Sequence[str],
    values: Sequence[int],
    payloads: Sequence[str],
    predecessor: str = ZERO_BYTES32,
    salt: str = ZERO_BYTES32,
) -> str:
    """TimelockController operation id of a batch."""
    encoded = encode(
        ["address[]", "uint256[]", "bytes[]", "bytes32", "bytes32"],
        [
            [to_normalized_address(target) for target in targets],
            list(values),
            _bytes_list(payloads),
            to_bytes(hexstr=predecessor),
            to_bytes(hexstr=salt),
        ],
    )
    return to_hex(keccak(encoded))


async def get_oz_proposal(governor: AsyncContract, proposal_id: int) -> ProposalStruct:
    snapshot = await governor.functions.proposalSnapshot(proposal_id).call()
    deadline = await governor.functions.proposalDeadline(proposal_id).call()
    eta = await governor.functions.proposalEta(proposal_id).call()
    against_votes, for_votes, abstain_votes = await governor.functions.proposalVotes(proposal_id).call()
    state = ProposalState(await governor.functions.state(proposal_id).call())
    return ProposalStruct(
        id=proposal_id,
        eta=eta,
        start_block=snapshot,
        end_block=deadline,
        for_votes=for_votes,
        against_votes=against_votes,
        abstain_votes=abstain_votes,
        canceled=state == ProposalState.CANCELED,
        executed=state == ProposalState.EXECUTED,
    )


def oz_governor_overrides(
    proposal_id: int,
    start_block: int,
    end_block: int,
    for_votes: int,
    operation_id: str,
) -> Dict[str, str]:
    """
    Puts the proposal past its voting period with every vote in favour and
    registers it as queued in the timelock under ``operation_id``.
    """
    return {
        f"_proposals[{proposal_id}].voteStart._deadline": str(start_block),
        f"_proposals[{proposal_id}].voteEnd._deadline": str(end_block),
        f"_proposals[{proposal_id}].canceled": "false",
        f"_proposals[{proposal_id}].executed": "false",
        f"_proposalVotes[{proposal_id}].forVotes": str(for_votes),
        f"_proposalVotes[{proposal_id}].againstVotes": "0",
        f"_proposalVotes[{proposal_id}].abstainVotes": "0",
        f"_timelockIds[{proposal_id}]": operation_id,
    }


def timelock_controller_overrides(operation_id: str, timestamp: int) -> Dict[str, str]:
    """An operation is ready once its ``_timestamps`` entry is in the past."""
    return {f"_timestamps[{operation_id}]": str(timestamp)}


def oz_execute_calldata(
    targets: Sequence[str],
    values: Sequence[int],
    calldatas: Sequence[str],
    description: str,
) -> str:
    return encode_function_call(
        OZ_EXECUTE_SIGNATURE,
        [
            [to_normalized_address(target) for target in targets],
            list(values),
            _bytes_list(calldatas),
            keccak(text=description),
        ],
    )


def execute_batch_calldata(
    targets: Sequence[str],
    values: Sequence[int],
    payloads: Sequence[str],
    predecessor: str = ZERO_BYTES32,
    salt: str = ZERO_BYTES32,
) -> str:
    return encode_function_call(
        TIMELOCK_EXECUTE_BATCH_SIGNATURE,
        [
            [to_normalized_address(target) for target in targets],
            list(values),
            _bytes_list(payloads),
            to_bytes(hexstr=predecessor),
            to_bytes(hexstr=salt),
        ],
    )
