"""
Governor access dispatched on ``GovernorType``: Bravo governors on one side,
OpenZeppelin and Arbitrum governors on the other.
"""

from typing import Any, Dict, List, Sequence

from eth_utils import to_hex
from web3 import AsyncWeb3
from web3.contract import AsyncContract
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from abi.erc20_abi import ERC20_ABI
from governor.bravo import get_bravo_governor, get_bravo_proposal, get_bravo_timelock
from governor.oz import get_oz_governor, get_oz_proposal, get_timelock_controller
from models.proposal import ProposalEvent, ProposalState, ProposalStruct
from models.simulation_config import GovernorType
from utils.abi_utils import function_selector
from utils.exceptions import ProposalNotFoundError, UnsupportedGovernorError
from utils.logger_utils import get_logger

logger = get_logger("Governor")

# Bravo forks name the voting token accessor after the token
BRAVO_VOTING_TOKEN_GETTERS = ("comp", "uni")


def _is_bravo(governor_type: GovernorType) -> bool:
    if governor_type == GovernorType.BRAVO:
        return True
    if governor_type in (GovernorType.OZ, GovernorType.ARB):
        return False
    raise UnsupportedGovernorError(f"Unsupported governor type: {governor_type}")


def _proposal_id_arg(governor_type: GovernorType) -> str:
    return "id" if _is_bravo(governor_type) else "proposalId"


def get_governor(governor_type: GovernorType, address: str, w3: AsyncWeb3) -> AsyncContract:
    if _is_bravo(governor_type):
        return get_bravo_governor(w3, address)
    return get_oz_governor(w3, address)


async def get_timelock(governor_type: GovernorType, governor: AsyncContract, w3: AsyncWeb3) -> AsyncContract:
    timelock_address = await governor.functions.timelock().call()
    if _is_bravo(governor_type):
        return get_bravo_timelock(w3, timelock_address)
    return get_timelock_controller(w3, timelock_address)


async def get_proposal(governor_type: GovernorType, governor: AsyncContract, proposal_id: int) -> ProposalStruct:
    if _is_bravo(governor_type):
        return await get_bravo_proposal(governor, proposal_id)
    return await get_oz_proposal(governor, proposal_id)


async def get_proposal_state(governor: AsyncContract, proposal_id: int) -> ProposalState:
    return ProposalState(await governor.functions.state(proposal_id).call())


def _event_to_proposal(governor_type: GovernorType, args: Dict[str, Any], chain_id: int) -> ProposalEvent:
    data = {
        "proposer": args["proposer"],
        "startBlock": args["startBlock"],
        "endBlock": args["endBlock"],
        "description": args["description"],
        "targets": list(args["targets"]),
        "values": list(args["values"]),
        "signatures": list(args["signatures"]),
        "calldatas": [to_hex(calldata) for calldata in args["calldatas"]],
        "chainid": str(chain_id),
    }
    data[_proposal_id_arg(governor_type)] = args[_proposal_id_arg(governor_type)]
    return ProposalEvent.model_validate(data)


async def get_proposal_created_events(
    governor_type: GovernorType,
    governor: AsyncContract,
    from_block: int = 0,
) -> List[ProposalEvent]:
    chain_id = await governor.w3.eth.chain_id
    logs = await governor.events.ProposalCreated.get_logs(from_block=from_block, to_block="latest")
    logger.info(f"Found {len(logs)} ProposalCreated events on governor {governor.address}")
    return [_event_to_proposal(governor_type, dict(log["args"]), chain_id) for log in logs]


async def get_proposal_ids(governor_type: GovernorType, governor: AsyncContract, from_block: int = 0) -> List[int]:
    events = await get_proposal_created_events(governor_type, governor, from_block)
    return [event.identifier for event in events]


async def get_proposal_created_event(
    governor_type: GovernorType,
    governor: AsyncContract,
    proposal_id: int,
    from_block: int = 0,
) -> ProposalEvent:
    for event in await get_proposal_created_events(governor_type, governor, from_block):
        if event.identifier == proposal_id:
            return event
    raise ProposalNotFoundError(f"No ProposalCreated event for proposal {proposal_id} on {governor.address}")


async def get_proposal_execution_tx(
    governor_type: GovernorType,
    governor: AsyncContract,
    proposal_id: int,
    from_block: int = 0,
) -> Dict[str, Any]:
    """The transaction that emitted ``ProposalExecuted`` for ``proposal_id``."""
    id_arg = _proposal_id_arg(governor_type)
    logs = await governor.events.ProposalExecuted.get_logs(from_block=from_block, to_block="latest")
    log = next((log for log in logs if log["args"][id_arg] == proposal_id), None)
    if log is None:
        raise ProposalNotFoundError(f"Proposal {proposal_id} has not been executed on {governor.address}")
    return dict(await governor.w3.eth.get_transaction(log["transactionHash"]))


async def get_voting_token(governor_type: GovernorType, governor: AsyncContract, w3: AsyncWeb3) -> AsyncContract:
    if not _is_bravo(governor_type):
        token_address = await governor.functions.token().call()
        return w3.eth.contract(address=token_address, abi=ERC20_ABI)

    for getter in BRAVO_VOTING_TOKEN_GETTERS:
        try:
            token_address = await governor.functions[getter]().call()
        except (ContractLogicError, BadFunctionCallOutput):
            logger.debug(f"Governor {governor.address} has no {getter}() accessor")
            continue
        return w3.eth.contract(address=token_address, abi=ERC20_ABI)
    raise UnsupportedGovernorError(f"Could not find the voting token of governor {governor.address}")


async def get_voting_token_supply(governor_type: GovernorType, governor: AsyncContract, w3: AsyncWeb3) -> int:
    token = await get_voting_token(governor_type, governor, w3)
    return await token.functions.totalSupply().call()


def build_call_datas(signatures: Sequence[str], calldatas: Sequence[str]) -> List[str]:
    """
    Full calldata of each action. Bravo actions store the signature separately
    from the arguments; an empty signature means the calldata is already complete.
    """
    call_datas = []
    for signature, calldata in zip(signatures, calldatas):
        if not signature:
            call_datas.append(calldata)
            continue
        args = calldata[2:] if calldata.startswith("0x") else calldata
        call_datas.append(function_selector(signature) + args)
    return call_datas
