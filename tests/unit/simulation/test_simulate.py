import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from clients.web3_clients import Web3Clients
from constants.arbitrum import L1_TIMELOCK
from constants.constants import DEFAULT_FROM
from governor.bravo import bravo_execute_calldata, bravo_timelock_overrides
from governor.governor import build_call_datas
from governor.oz import (
    description_hash,
    execute_batch_calldata,
    hash_operation_batch,
    hash_proposal,
    oz_execute_calldata,
)
from models.proposal import ProposalActions, ProposalEvent, ProposalStruct
from models.simulation import LatestBlock
from models.simulation_config import (
    SimulationConfigArbL2ToL1,
    SimulationConfigArbRetryable,
    SimulationConfigExecuted,
    SimulationConfigProposed,
    parse_simulation_config,
)
from models.tenderly import StorageEncodingResponse, TenderlySimulation
from simulation.simulate import (
    SimulationWindow,
    build_execution_payload,
    simulate,
    simulate_arb_l2_to_l1,
    simulate_arb_retryable,
    simulate_executed,
    simulate_new,
    simulate_proposed,
)
from sims.non_emerg_sc_atlas_fees import config as atlas_config
from sims.uniswap_new_fee_tier import config as uniswap_config
from utils.formatter_utils import ZERO_BYTES32

GOVERNOR = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
TIMELOCK = "0xc0Da02939E1441F497fd74F78cE7Decb17B66529"
PROPOSER = "0xD73a92Be73EfbFcF3854433A5FcbAbF9c1316073"
LATEST = LatestBlock(number=1000, timestamp=1_700_000_000, hash="0x" + "ab" * 32)


def make_sim(status=True):
    return TenderlySimulation.model_validate(
        {"transaction": {"status": status}, "simulation": {"id": "sim-1", "status": status}}
    )


def make_tenderly(status=True):
    tenderly = MagicMock()
    tenderly.simulate = AsyncMock(return_value=make_sim(status))
    tenderly.share_simulation = AsyncMock()
    return tenderly


def encoded_storage(*addresses):
    """Encode-states response with one distinct slot per address."""
    return AsyncMock(
        return_value=StorageEncodingResponse.model_validate(
            {
                "stateOverrides": {
                    address.lower(): {"value": {hex(i): "0x01"}} for i, address in enumerate(addresses, start=1)
                }
            }
        )
    )


async def resolved(value):
    return value


def created_event(**overrides):
    values = dict(
        proposer=PROPOSER,
        start_block=10,
        end_block=20,
        description="# Lower the fee\nbody",
        targets=[GOVERNOR],
        values=[3],
        signatures=["setFee(uint256)"],
        calldatas=["0x" + f"{5:064x}"],
        chainid="1",
    )
    values.update(overrides)
    return ProposalEvent(**values)


def retryable_config():
    return SimulationConfigArbRetryable(
        dao_name="Arbitrum",
        governor_address="0xE6841D92B0C345144506576eC13ECf5103aC7f49",
        governor_type="arb",
        targets=[GOVERNOR],
        values=[0],
        signatures=[""],
        calldatas=["0x1cff79cd"],
        description="retryable",
        parent_id=77,
        id_offset=2,
        from_=DEFAULT_FROM,
        chain_id=42161,
    )


def test_simulation_window():
    window = SimulationWindow(LATEST)

    assert window.start_block == 900
    assert window.end_block == 999
    assert window.sim_block == 1001
    assert window.sim_timestamp == 1_700_000_001


def test_build_execution_payload_funds_sender_and_sets_storage():
    payload = build_execution_payload(
        "1", SimulationWindow(LATEST), GOVERNOR, "0xfe0d94c1", 5, {TIMELOCK: {"0x01": "0x02"}}
    )
    request = payload.to_request()

    assert request["from"] == DEFAULT_FROM
    assert request["block_number"] == 1000
    assert request["block_header"] == {"number": hex(1001), "timestamp": hex(1_700_000_001)}
    assert request["state_objects"][DEFAULT_FROM] == {"balance": "5"}
    assert request["state_objects"][TIMELOCK] == {"storage": {"0x01": "0x02"}}


@pytest.mark.asyncio
async def test_simulate_arb_retryable_sends_from_aliased_timelock():
    tenderly = make_tenderly()
    w3 = MagicMock()

    with patch("simulation.simulate.get_latest_block", AsyncMock(return_value=LATEST)):
        result, deps = await simulate_arb_retryable(retryable_config(), w3, tenderly)

    payload = tenderly.simulate.call_args.args[0]
    assert payload.network_id == "42161"
    assert payload.from_ == DEFAULT_FROM
    assert payload.to == GOVERNOR
    assert payload.input == "0x1cff79cd"
    tenderly.encode_state_overrides.assert_not_called()
    tenderly.share_simulation.assert_awaited_once_with("sim-1")

    assert result.proposal.identifier == 77
    assert deps.executor == DEFAULT_FROM
    assert deps.chain_id == 42161


@pytest.mark.asyncio
async def test_reverted_simulation_is_not_shared():
    tenderly = make_tenderly(status=False)

    with patch("simulation.simulate.get_latest_block", AsyncMock(return_value=LATEST)):
        result, _ = await simulate_arb_retryable(retryable_config(), MagicMock(), tenderly)

    assert not result.sim.simulation.status
    tenderly.share_simulation.assert_not_called()


@pytest.mark.asyncio
async def test_simulate_new_oz_proposal():
    governor = MagicMock(address=GOVERNOR)
    timelock = MagicMock(address=TIMELOCK)
    tenderly = make_tenderly()
    tenderly.encode_state_overrides = AsyncMock(
        return_value=StorageEncodingResponse.model_validate(
            {
                "stateOverrides": {
                    GOVERNOR.lower(): {"value": {"0x01": "0x02"}},
                    TIMELOCK.lower(): {"value": {"0x03": "0x04"}},
                }
            }
        )
    )

    with patch(
        "simulation.simulate._governor_context", AsyncMock(return_value=(governor, timelock, 42161))
    ), patch("simulation.simulate.get_latest_block", AsyncMock(return_value=LATEST)), patch(
        "simulation.simulate.get_voting_token_supply", AsyncMock(return_value=10**28)
    ):
        result, deps = await simulate_new(atlas_config, MagicMock(), tenderly)

    call_datas = build_call_datas(atlas_config.signatures, atlas_config.calldatas)
    proposal_id = hash_proposal(atlas_config.targets, atlas_config.values, call_datas, atlas_config.description)

    network_id, overrides = tenderly.encode_state_overrides.call_args.args
    assert network_id == "42161"
    governor_overrides = overrides[GOVERNOR]
    assert governor_overrides[f"_proposals[{proposal_id}].voteStart._deadline"] == "900"
    assert governor_overrides[f"_proposals[{proposal_id}].voteEnd._deadline"] == "999"
    assert governor_overrides[f"_proposalVotes[{proposal_id}].forVotes"] == str(10**28)
    operation_id = governor_overrides[f"_timelockIds[{proposal_id}]"]
    assert overrides[TIMELOCK] == {f"_timestamps[{operation_id}]": "1700000001"}

    payload = tenderly.simulate.call_args.args[0]
    assert payload.to == GOVERNOR
    assert payload.input == oz_execute_calldata(
        atlas_config.targets, atlas_config.values, call_datas, atlas_config.description
    )
    assert payload.state_objects[GOVERNOR].storage == {"0x01": "0x02"}
    assert payload.state_objects[TIMELOCK].storage == {"0x03": "0x04"}

    assert result.proposal.proposal_id == proposal_id
    assert result.proposal.id is None
    assert deps.executor == TIMELOCK


@pytest.mark.asyncio
async def test_simulate_routes_l1_leg_to_l1_client():
    clients = Web3Clients(primary=MagicMock(), l1=MagicMock(), arb1=MagicMock(), nova=MagicMock())
    config = parse_simulation_config(
        {
            "type": "arbl2tol1",
            "daoName": "Arbitrum",
            "governorAddress": "0xE6841D92B0C345144506576eC13ECf5103aC7f49",
            "governorType": "arb",
            "targets": [GOVERNOR],
            "values": ["0"],
            "signatures": [""],
            "calldatas": ["0x"],
            "description": "l1 leg",
            "parentId": "5",
            "idoffset": 1,
        }
    )
    tenderly = make_tenderly()

    with patch("simulation.simulate.simulate_arb_l2_to_l1", AsyncMock(return_value="outcome")) as sim_l1:
        assert await simulate(config, clients, tenderly) == "outcome"

    sim_l1.assert_awaited_once_with(config, clients.l1, tenderly)


@pytest.mark.asyncio
async def test_simulate_routes_retryable_to_its_chain():
    clients = Web3Clients(primary=MagicMock(), l1=MagicMock(), arb1=MagicMock(), nova=MagicMock())
    config = retryable_config()
    tenderly = make_tenderly()

    with patch("simulation.simulate.simulate_arb_retryable", AsyncMock(return_value="outcome")) as sim_l2:
        await simulate(config, clients, tenderly)

    sim_l2.assert_awaited_once_with(config, clients.arb1, tenderly)


@pytest.mark.asyncio
async def test_simulate_new_bravo_proposal_writes_whole_proposal():
    governor = MagicMock(address=GOVERNOR)
    timelock = MagicMock(address=TIMELOCK)
    tenderly = make_tenderly()
    tenderly.encode_state_overrides = encoded_storage(GOVERNOR, TIMELOCK)

    with patch(
        "simulation.simulate._governor_context", AsyncMock(return_value=(governor, timelock, 1))
    ), patch("simulation.simulate.get_latest_block", AsyncMock(return_value=LATEST)), patch(
        "simulation.simulate.get_voting_token_supply", AsyncMock(return_value=10**27)
    ), patch("simulation.simulate.next_bravo_proposal_id", AsyncMock(return_value=42)):
        result, deps = await simulate_new(uniswap_config, MagicMock(), tenderly)

    _, overrides = tenderly.encode_state_overrides.call_args.args
    governor_overrides = overrides[GOVERNOR]
    assert governor_overrides["proposalCount"] == "42"
    assert governor_overrides["proposals[42].eta"] == "1700000001"
    assert governor_overrides["proposals[42].forVotes"] == str(10**27)
    assert governor_overrides["proposals[42].targets[0]"] == uniswap_config.targets[0]
    assert overrides[TIMELOCK] == bravo_timelock_overrides(
        uniswap_config.targets,
        uniswap_config.values,
        uniswap_config.signatures,
        uniswap_config.calldatas,
        1_700_000_001,
    )

    payload = tenderly.simulate.call_args.args[0]
    assert payload.input == bravo_execute_calldata(42)
    assert payload.network_id == "1"

    assert result.proposal.id == 42
    assert result.proposal.proposal_id is None
    assert deps.executor == TIMELOCK


def proposed_config(governor_type, proposal_id):
    return SimulationConfigProposed(
        dao_name="Compound", governor_address=GOVERNOR, governor_type=governor_type, proposal_id=proposal_id
    )


@pytest.mark.asyncio
async def test_simulate_proposed_bravo_keeps_queued_eta():
    queued_eta = 1_700_005_000
    actions = ProposalActions(
        targets=[TIMELOCK], values=[0], signatures=["_setPendingAdmin(address)"], calldatas=["0x" + "00" * 32]
    )
    tenderly = make_tenderly()
    tenderly.encode_state_overrides = encoded_storage(GOVERNOR, TIMELOCK)

    with patch(
        "simulation.simulate._governor_context",
        AsyncMock(return_value=(MagicMock(address=GOVERNOR), MagicMock(address=TIMELOCK), 1)),
    ), patch("simulation.simulate.get_latest_block", AsyncMock(return_value=LATEST)), patch(
        "simulation.simulate.get_proposal_created_event", AsyncMock(return_value=created_event(id=7))
    ), patch("simulation.simulate.get_voting_token_supply", AsyncMock(return_value=10**25)), patch(
        "simulation.simulate.get_proposal", AsyncMock(return_value=ProposalStruct(id=7, eta=queued_eta))
    ), patch("simulation.simulate.get_bravo_actions", AsyncMock(return_value=actions)):
        result, _ = await simulate_proposed(proposed_config("bravo", 7), MagicMock(), tenderly)

    _, overrides = tenderly.encode_state_overrides.call_args.args
    assert overrides[GOVERNOR]["proposals[7].eta"] == str(queued_eta)
    assert overrides[GOVERNOR]["proposals[7].startBlock"] == "900"
    assert overrides[TIMELOCK] == bravo_timelock_overrides(
        actions.targets, actions.values, actions.signatures, actions.calldatas, queued_eta
    )

    payload = tenderly.simulate.call_args.args[0]
    assert payload.block_header.timestamp == hex(queued_eta)
    assert payload.input == bravo_execute_calldata(7)
    assert payload.value == "3"
    assert result.proposal.identifier == 7


@pytest.mark.asyncio
async def test_simulate_proposed_oz_registers_timelock_operation():
    proposal_id = 2**200 + 1
    event = created_event(proposal_id=proposal_id, signatures=[""], values=[0])
    get_bravo_actions = AsyncMock()
    tenderly = make_tenderly()
    tenderly.encode_state_overrides = encoded_storage(GOVERNOR, TIMELOCK)

    with patch(
        "simulation.simulate._governor_context",
        AsyncMock(return_value=(MagicMock(address=GOVERNOR), MagicMock(address=TIMELOCK), 42161)),
    ), patch("simulation.simulate.get_latest_block", AsyncMock(return_value=LATEST)), patch(
        "simulation.simulate.get_proposal_created_event", AsyncMock(return_value=event)
    ), patch("simulation.simulate.get_voting_token_supply", AsyncMock(return_value=10**26)), patch(
        "simulation.simulate.get_proposal", AsyncMock(return_value=ProposalStruct(id=proposal_id))
    ), patch("simulation.simulate.get_bravo_actions", get_bravo_actions):
        await simulate_proposed(proposed_config("arb", proposal_id), MagicMock(), tenderly)

    operation_id = hash_operation_batch(
        event.targets, event.values, event.calldatas, ZERO_BYTES32, description_hash(event.description)
    )
    _, overrides = tenderly.encode_state_overrides.call_args.args
    assert overrides[GOVERNOR][f"_timelockIds[{proposal_id}]"] == operation_id
    assert overrides[GOVERNOR][f"_proposalVotes[{proposal_id}].forVotes"] == str(10**26)
    assert overrides[TIMELOCK] == {f"_timestamps[{operation_id}]": "1700000001"}

    payload = tenderly.simulate.call_args.args[0]
    assert payload.block_header.timestamp == hex(1_700_000_001)
    assert payload.input == oz_execute_calldata(event.targets, event.values, event.calldatas, event.description)
    get_bravo_actions.assert_not_called()


@pytest.mark.asyncio
async def test_simulate_executed_replays_at_original_position():
    tx = {
        "blockNumber": 19_000_000,
        "transactionIndex": 12,
        "from": PROPOSER,
        "to": GOVERNOR,
        "input": bytes.fromhex("fe0d94c1" + f"{117:064x}"),
        "gas": 600_000,
        "gasPrice": 30 * 10**9,
        "value": 0,
    }
    w3 = MagicMock()
    w3.eth.get_block = AsyncMock(return_value={"number": 19_000_000, "timestamp": 1_710_000_000, "hash": b"\xab" * 32})
    tenderly = make_tenderly()
    config = SimulationConfigExecuted(
        dao_name="Compound", governor_address=GOVERNOR, governor_type="bravo", proposal_id=117
    )

    with patch(
        "simulation.simulate._governor_context",
        AsyncMock(return_value=(MagicMock(address=GOVERNOR), MagicMock(address=TIMELOCK), 1)),
    ), patch(
        "simulation.simulate.get_proposal_created_event", AsyncMock(return_value=created_event(id=117))
    ), patch("simulation.simulate.get_proposal_execution_tx", AsyncMock(return_value=tx)):
        result, deps = await simulate_executed(config, w3, tenderly)

    w3.eth.get_block.assert_awaited_once_with(19_000_000)
    payload = tenderly.simulate.call_args.args[0]
    assert payload.block_number == 19_000_000
    assert payload.transaction_index == 12
    assert payload.from_ == PROPOSER
    assert payload.input == "0xfe0d94c1" + f"{117:064x}"
    assert payload.gas == 600_000
    assert payload.gas_price == str(30 * 10**9)
    assert payload.block_header is None
    assert payload.state_objects is None
    tenderly.encode_state_overrides.assert_not_called()

    assert result.latest_block.number == 19_000_000
    assert result.latest_block.timestamp == 1_710_000_000
    assert result.proposal.identifier == 117
    assert deps.executor == TIMELOCK


@pytest.mark.asyncio
async def test_simulate_arb_l2_to_l1_uses_batch_predecessor_and_salt():
    predecessor = "0x" + "00" * 31 + "02"
    salt = "0x" + "11" * 32
    config = SimulationConfigArbL2ToL1(
        dao_name="Arbitrum",
        governor_address=L1_TIMELOCK,
        governor_type="arb",
        targets=[GOVERNOR],
        values=[0],
        signatures=[""],
        calldatas=["0x1cff79cd"],
        description="l1 leg",
        parent_id=5,
        id_offset=1,
        predecessor=predecessor,
        salt=salt,
    )
    w3 = MagicMock()
    w3.eth.chain_id = resolved(1)
    tenderly = make_tenderly()
    tenderly.encode_state_overrides = encoded_storage(L1_TIMELOCK)

    with patch(
        "simulation.simulate.get_timelock_controller", MagicMock(return_value=MagicMock(address=L1_TIMELOCK))
    ), patch("simulation.simulate.get_latest_block", AsyncMock(return_value=LATEST)):
        result, deps = await simulate_arb_l2_to_l1(config, w3, tenderly)

    operation_id = hash_operation_batch(config.targets, config.values, config.calldatas, predecessor, salt)
    assert operation_id != hash_operation_batch(config.targets, config.values, config.calldatas)
    network_id, overrides = tenderly.encode_state_overrides.call_args.args
    assert network_id == "1"
    assert overrides == {L1_TIMELOCK: {f"_timestamps[{operation_id}]": "1700000001"}}

    payload = tenderly.simulate.call_args.args[0]
    assert payload.to == L1_TIMELOCK
    assert payload.input == execute_batch_calldata(config.targets, config.values, config.calldatas, predecessor, salt)
    assert payload.state_objects[L1_TIMELOCK].storage == {"0x1": "0x01"}

    assert result.proposal.identifier == 5
    assert deps.executor == L1_TIMELOCK
    assert deps.governor is None
