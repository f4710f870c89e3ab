"""
Builds Tenderly simulations for every kind of simulation config.

Governor proposals (``new``, ``proposed``) are made executable through storage
overrides: the governor sees the proposal as passed and queued, the timelock sees
its actions as ready. ``executed`` proposals are replayed as they happened, and the
Arbitrum legs run against the L1 timelock or the L2 target directly.
"""

from typing import Dict, Tuple

from eth_utils import to_hex
from web3 import AsyncWeb3
from web3.contract import AsyncContract

from clients.tenderly_client import StateOverrides, TenderlyClient
from clients.web3_clients import Web3Clients, client_for_chain
from config.settings import settings
from constants.constants import BLOCK_GAS_LIMIT, DEFAULT_FROM, VOTING_WINDOW_START_OFFSET
from governor.bravo import (
    bravo_execute_calldata,
    bravo_new_proposal_overrides,
    bravo_proposal_overrides,
    bravo_timelock_overrides,
    get_bravo_actions,
    next_bravo_proposal_id,
)
from governor.governor import (
    build_call_datas,
    get_governor,
    get_proposal,
    get_proposal_created_event,
    get_proposal_execution_tx,
    get_timelock,
    get_voting_token_supply,
)
from governor.oz import (
    description_hash,
    execute_batch_calldata,
    get_timelock_controller,
    hash_operation_batch,
    hash_proposal,
    oz_execute_calldata,
    oz_governor_overrides,
    timelock_controller_overrides,
)
from models.proposal import ProposalData, ProposalEvent
from models.simulation import LatestBlock, SimulationResult
from models.simulation_config import (
    GovernorType,
    SimulationConfig,
    SimulationConfigArbL2ToL1,
    SimulationConfigArbRetryable,
    SimulationConfigExecuted,
    SimulationConfigNew,
    SimulationConfigProposed,
)
from models.tenderly import BlockHeader, StateObject, TenderlyPayload, TenderlySimulation
from utils.exceptions import UnsupportedGovernorError
from utils.formatter_utils import ZERO_BYTES32
from utils.logger_utils import get_logger

logger = get_logger("Simulate")

SimulationOutcome = Tuple[SimulationResult, ProposalData]


class SimulationWindow(object):
    """
    Blocks and timestamps a governor simulation is anchored to: voting ran over
    the last ``VOTING_WINDOW_START_OFFSET`` blocks and execution happens in the
    block after ``latest``.
    """

    def __init__(self, latest: LatestBlock):
        self.latest = latest
        self.start_block = latest.number - VOTING_WINDOW_START_OFFSET
        self.end_block = latest.number - 1
        self.sim_block = latest.number + 1
        self.sim_timestamp = latest.timestamp + 1


async def get_latest_block(w3: AsyncWeb3) -> LatestBlock:
    return LatestBlock.from_web3_block(dict(await w3.eth.get_block("latest")))


async def encode_storage(
    tenderly: TenderlyClient, network_id: str, overrides: StateOverrides
) -> Dict[str, Dict[str, str]]:
    """Raw storage slots per contract for overrides written as Solidity expressions."""
    encoded = await tenderly.encode_state_overrides(network_id, overrides)
    return {address: encoded.storage_for(address) for address in overrides}


def build_execution_payload(
    network_id: str,
    window: SimulationWindow,
    to: str,
    input_data: str,
    value: int,
    storage: Dict[str, Dict[str, str]],
    from_address: str = DEFAULT_FROM,
) -> TenderlyPayload:
    state_objects = {from_address: StateObject(balance=str(value))}
    for address, slots in storage.items():
        state_objects[address] = StateObject(storage=slots)

    return TenderlyPayload(
        network_id=network_id,
        block_number=window.latest.number,
        from_=from_address,
        to=to,
        input=input_data,
        gas=BLOCK_GAS_LIMIT,
        gas_price="0",
        value=str(value),
        save_if_fails=True,
        save=True,
        generate_access_list=True,
        block_header=BlockHeader(number=hex(window.sim_block), timestamp=hex(window.sim_timestamp)),
        state_objects=state_objects,
    )


async def run_tenderly_simulation(tenderly: TenderlyClient, payload: TenderlyPayload) -> TenderlySimulation:
    sim = await tenderly.simulate(payload)
    if sim.simulation.status:
        await tenderly.share_simulation(sim.simulation.id)
    else:
        logger.warning(f"Simulation {sim.simulation.id} reverted: {sim.revert_reason or 'no reason given'}")
    return sim


async def _governor_context(config: SimulationConfig, w3: AsyncWeb3) -> Tuple[AsyncContract, AsyncContract, int]:
    governor = get_governor(config.governor_type, config.governor_address, w3)
    timelock = await get_timelock(config.governor_type, governor, w3)
    chain_id = await w3.eth.chain_id
    return governor, timelock, chain_id


async def simulate_new(config: SimulationConfigNew, w3: AsyncWeb3, tenderly: TenderlyClient) -> SimulationOutcome:
    governor, timelock, chain_id = await _governor_context(config, w3)
    network_id = str(chain_id)
    window = SimulationWindow(await get_latest_block(w3))
    eta = window.sim_timestamp
    for_votes = await get_voting_token_supply(config.governor_type, governor, w3)

    if config.governor_type == GovernorType.BRAVO:
        proposal_id = await next_bravo_proposal_id(governor)
        governor_overrides = bravo_new_proposal_overrides(
            proposal_id,
            DEFAULT_FROM,
            config.targets,
            config.values,
            config.signatures,
            config.calldatas,
            eta,
            for_votes,
            window.start_block,
            window.end_block,
        )
        timelock_overrides = bravo_timelock_overrides(
            config.targets, config.values, config.signatures, config.calldatas, eta
        )
        input_data = bravo_execute_calldata(proposal_id)
    else:
        call_datas = build_call_datas(config.signatures, config.calldatas)
        proposal_id = hash_proposal(config.targets, config.values, call_datas, config.description)
        operation_id = hash_operation_batch(
            config.targets, config.values, call_datas, ZERO_BYTES32, description_hash(config.description)
        )
        governor_overrides = oz_governor_overrides(
            proposal_id, window.start_block, window.end_block, for_votes, operation_id
        )
        timelock_overrides = timelock_controller_overrides(operation_id, eta)
        input_data = oz_execute_calldata(config.targets, config.values, call_datas, config.description)

    logger.info(f"Simulating new {config.dao_name} proposal {proposal_id} at block {window.sim_block}")
    storage = await encode_storage(
        tenderly, network_id, {governor.address: governor_overrides, timelock.address: timelock_overrides}
    )
    payload = build_execution_payload(network_id, window, governor.address, input_data, config.total_value, storage)
    sim = await run_tenderly_simulation(tenderly, payload)

    proposal = ProposalEvent(
        id=proposal_id if config.governor_type == GovernorType.BRAVO else None,
        proposal_id=None if config.governor_type == GovernorType.BRAVO else proposal_id,
        proposer=DEFAULT_FROM,
        start_block=window.start_block,
        end_block=window.end_block,
        description=config.description,
        targets=config.targets,
        values=config.values,
        signatures=config.signatures,
        calldatas=config.calldatas,
        chainid=network_id,
    )
    deps = ProposalData(governor=governor, timelock=timelock, w3=w3, executor=timelock.address, chain_id=chain_id)
    return SimulationResult(sim=sim, proposal=proposal, latest_block=window.latest), deps


async def simulate_proposed(
    config: SimulationConfigProposed, w3: AsyncWeb3, tenderly: TenderlyClient
) -> SimulationOutcome:
    governor, timelock, chain_id = await _governor_context(config, w3)
    network_id = str(chain_id)
    window = SimulationWindow(await get_latest_block(w3))
    proposal = await get_proposal_created_event(
        config.governor_type,
        governor,
        config.proposal_id,
        settings.simulation.proposal_events_from_block,
    )
    for_votes = await get_voting_token_supply(config.governor_type, governor, w3)
    onchain = await get_proposal(config.governor_type, governor, config.proposal_id)
    # A queued proposal keeps its eta, which must also be reached in the simulated block
    eta = onchain.eta or window.sim_timestamp
    window.sim_timestamp = max(window.sim_timestamp, eta)

    if config.governor_type == GovernorType.BRAVO:
        actions = await get_bravo_actions(governor, config.proposal_id)
        governor_overrides = bravo_proposal_overrides(
            config.proposal_id, eta, for_votes, window.start_block, window.end_block
        )
        timelock_overrides = bravo_timelock_overrides(
            actions.targets, actions.values, actions.signatures, actions.calldatas, eta
        )
        input_data = bravo_execute_calldata(config.proposal_id)
    else:
        call_datas = build_call_datas(proposal.signatures, proposal.calldatas)
        operation_id = hash_operation_batch(
            proposal.targets, proposal.values, call_datas, ZERO_BYTES32, description_hash(proposal.description)
        )
        governor_overrides = oz_governor_overrides(
            config.proposal_id, window.start_block, window.end_block, for_votes, operation_id
        )
        timelock_overrides = timelock_controller_overrides(operation_id, eta)
        input_data = oz_execute_calldata(proposal.targets, proposal.values, call_datas, proposal.description)

    logger.info(f"Simulating {config.dao_name} proposal {config.proposal_id} at block {window.sim_block}")
    storage = await encode_storage(
        tenderly, network_id, {governor.address: governor_overrides, timelock.address: timelock_overrides}
    )
    total_value = sum(proposal.values)
    payload = build_execution_payload(network_id, window, governor.address, input_data, total_value, storage)
    sim = await run_tenderly_simulation(tenderly, payload)

    deps = ProposalData(governor=governor, timelock=timelock, w3=w3, executor=timelock.address, chain_id=chain_id)
    return SimulationResult(sim=sim, proposal=proposal, latest_block=window.latest), deps


async def simulate_executed(
    config: SimulationConfigExecuted, w3: AsyncWeb3, tenderly: TenderlyClient
) -> SimulationOutcome:
    """Replays the execution transaction at its original position in its block."""
    governor, timelock, chain_id = await _governor_context(config, w3)
    from_block = settings.simulation.proposal_events_from_block
    proposal = await get_proposal_created_event(config.governor_type, governor, config.proposal_id, from_block)
    tx = await get_proposal_execution_tx(config.governor_type, governor, config.proposal_id, from_block)
    block = LatestBlock.from_web3_block(dict(await w3.eth.get_block(tx["blockNumber"])))

    logger.info(f"Replaying execution of {config.dao_name} proposal {config.proposal_id} from block {block.number}")
    payload = TenderlyPayload(
        network_id=str(chain_id),
        block_number=tx["blockNumber"],
        transaction_index=tx["transactionIndex"],
        from_=tx["from"],
        to=tx["to"],
        input=to_hex(tx["input"]),
        gas=tx["gas"],
        gas_price=str(tx.get("gasPrice", 0)),
        value=str(tx["value"]),
        save_if_fails=True,
        save=True,
        generate_access_list=True,
    )
    sim = await run_tenderly_simulation(tenderly, payload)

    deps = ProposalData(governor=governor, timelock=timelock, w3=w3, executor=timelock.address, chain_id=chain_id)
    return SimulationResult(sim=sim, proposal=proposal, latest_block=block), deps


async def simulate_arb_l2_to_l1(
    config: SimulationConfigArbL2ToL1, w3: AsyncWeb3, tenderly: TenderlyClient
) -> SimulationOutcome:
    """Executes the scheduled batch on the L1 timelock as if its delay had passed."""
    chain_id = await w3.eth.chain_id
    network_id = str(chain_id)
    timelock = get_timelock_controller(w3, config.governor_address)
    window = SimulationWindow(await get_latest_block(w3))

    call_datas = build_call_datas(config.signatures, config.calldatas)
    operation_id = hash_operation_batch(config.targets, config.values, call_datas, config.predecessor, config.salt)
    storage = await encode_storage(
        tenderly, network_id, {timelock.address: timelock_controller_overrides(operation_id, window.sim_timestamp)}
    )
    input_data = execute_batch_calldata(config.targets, config.values, call_datas, config.predecessor, config.salt)

    logger.info(f"Simulating L1 leg {config.id_offset} of proposal {config.parent_id} on {timelock.address}")
    payload = build_execution_payload(network_id, window, timelock.address, input_data, config.total_value, storage)
    sim = await run_tenderly_simulation(tenderly, payload)

    proposal = _derived_proposal(config, window, network_id)
    deps = ProposalData(timelock=timelock, w3=w3, executor=timelock.address, chain_id=chain_id)
    return SimulationResult(sim=sim, proposal=proposal, latest_block=window.latest), deps


async def simulate_arb_retryable(
    config: SimulationConfigArbRetryable, w3: AsyncWeb3, tenderly: TenderlyClient
) -> SimulationOutcome:
    """Runs the retryable ticket's L2 call, sent by the aliased L1 timelock."""
    network_id = str(config.chain_id)
    window = SimulationWindow(await get_latest_block(w3))
    call_data = build_call_datas(config.signatures, config.calldatas)[0]

    logger.info(
        f"Simulating retryable leg {config.id_offset} of proposal {config.parent_id} on chain {config.chain_id}"
    )
    payload = build_execution_payload(
        network_id, window, config.targets[0], call_data, config.values[0], {}, from_address=config.from_
    )
    sim = await run_tenderly_simulation(tenderly, payload)

    proposal = _derived_proposal(config, window, network_id)
    deps = ProposalData(w3=w3, executor=config.from_, chain_id=config.chain_id)
    return SimulationResult(sim=sim, proposal=proposal, latest_block=window.latest), deps


def _derived_proposal(config: SimulationConfig, window: SimulationWindow, network_id: str) -> ProposalEvent:
    return ProposalEvent(
        id=config.parent_id,
        proposer=DEFAULT_FROM,
        start_block=window.latest.number,
        end_block=window.latest.number,
        description=config.description,
        targets=config.targets,
        values=config.values,
        signatures=config.signatures,
        calldatas=config.calldatas,
        chainid=network_id,
    )


async def simulate(config: SimulationConfig, clients: Web3Clients, tenderly: TenderlyClient) -> SimulationOutcome:
    """
    Simulates ``config`` and returns the result together with the dependencies
    the proposal checks need.
    """
    if config.type == "new":
        return await simulate_new(config, clients.primary, tenderly)
    if config.type == "proposed":
        return await simulate_proposed(config, clients.primary, tenderly)
    if config.type == "executed":
        return await simulate_executed(config, clients.primary, tenderly)
    if config.type == "arbl2tol1":
        return await simulate_arb_l2_to_l1(config, clients.l1, tenderly)
    if config.type == "arbretryable":
        return await simulate_arb_retryable(config, client_for_chain(clients, config.chain_id), tenderly)
    raise UnsupportedGovernorError(f"Unknown simulation type: {config.type}")
