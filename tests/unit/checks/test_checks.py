import pytest
from unittest.mock import AsyncMock, MagicMock

from checks.base import ProposalCheck
from checks.check_decode_calldata import CheckDecodeCalldata, find_matching_call
from checks.check_logs import CheckLogs
from checks.check_selfdestruct import CheckTargetsNoSelfdestruct
from checks.check_simulation_status import CheckSimulationStatus
from checks.check_state_changes import CheckStateChanges
from checks.check_targets_verified import CheckTargetsVerified
from checks.check_value_required import CheckValueRequired
from checks.runner import ALL_CHECKS, run_checks
from constants.arbitrum import RETRYABLE_TICKET_MAGIC
from constants.constants import DEFAULT_FROM
from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import CallTrace, TenderlySimulation

TIMELOCK = "0xc0Da02939E1441F497fd74F78cE7Decb17B66529"
TARGET = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
OTHER = "0xD73a92Be73EfbFcF3854433A5FcbAbF9c1316073"
CALLDATA = "0x928c169a"


def make_proposal(targets=(TARGET,), values=(0,), calldatas=(CALLDATA,)):
    return ProposalEvent(
        id=1,
        proposer=DEFAULT_FROM,
        start_block=1,
        end_block=2,
        description="# Test",
        targets=list(targets),
        values=list(values),
        signatures=[""] * len(targets),
        calldatas=list(calldatas),
    )


def make_sim(status=True, transaction_info=None, contracts=None, addresses=None, error_message=None):
    return TenderlySimulation.model_validate(
        {
            "transaction": {
                "status": status,
                "block_number": 100,
                "addresses": addresses or [],
                "error_message": error_message,
                "transaction_info": transaction_info or {},
            },
            "simulation": {"id": "sim-1", "status": status},
            "contracts": contracts or [],
        }
    )


def make_deps(codes=None, nonces=None, balance=0):
    codes = codes or {}
    nonces = nonces or {}
    w3 = MagicMock()
    w3.eth.get_code = AsyncMock(side_effect=lambda address, block_identifier: codes.get(address, b""))
    w3.eth.get_transaction_count = AsyncMock(side_effect=lambda address, block_identifier: nonces.get(address, 0))
    w3.eth.get_balance = AsyncMock(return_value=balance)
    return ProposalData(w3=w3, executor=TIMELOCK, chain_id=1)


@pytest.mark.asyncio
async def test_simulation_status():
    check = CheckSimulationStatus()

    passed = await check.check_proposal(make_proposal(), make_sim(), make_deps())
    failed = await check.check_proposal(
        make_proposal(), make_sim(status=False, error_message="execution reverted"), make_deps()
    )

    assert passed.passed
    assert failed.errors == ["Transaction reverted: execution reverted"]


@pytest.mark.asyncio
async def test_targets_verified():
    sim = make_sim(contracts=[{"address": TARGET.lower(), "contract_name": "UniswapV3Factory"}])
    deps = make_deps(codes={OTHER: b"\x60\x00"})
    proposal = make_proposal(targets=(TARGET, OTHER, TIMELOCK), values=(0, 0, 0), calldatas=("0x", "0x", "0x"))

    result = await CheckTargetsVerified().check_proposal(proposal, sim, deps)

    assert result.info == [f"{TARGET}: Contract (verified)", f"{TIMELOCK}: EOA (verification not applicable)"]
    assert result.warnings == [f"{OTHER}: Contract (not verified)"]
    assert result.status == "warning"


@pytest.mark.asyncio
async def test_targets_no_selfdestruct():
    destructible = "0x0000000000000000000000000000000000000001"
    proxy = "0x0000000000000000000000000000000000000002"
    safe = "0x0000000000000000000000000000000000000003"
    empty = "0x0000000000000000000000000000000000000004"
    codes = {destructible: b"\x60\x00\xff", proxy: b"\x60\x00\xf4", safe: b"\x60\xff\x00"}
    deps = make_deps(codes=codes, nonces={OTHER: 3})
    targets = (destructible, proxy, safe, empty, OTHER, TIMELOCK)
    proposal = make_proposal(targets=targets, values=(0,) * 6, calldatas=("0x",) * 6)

    result = await CheckTargetsNoSelfdestruct().check_proposal(proposal, make_sim(), deps)

    assert result.errors == [f"{destructible}: Contract (with SELFDESTRUCT)"]
    assert result.warnings == [f"{proxy}: Contract (with DELEGATECALL)", f"{empty}: EOA (may have code later)"]
    assert result.info == [
        f"{safe}: Contract (looks safe)",
        f"{OTHER}: EOA",
        f"{TIMELOCK}: Trusted contract (not checked)",
    ]


def test_find_matching_call_searches_nested_calls():
    trace = CallTrace.model_validate(
        {
            "from": DEFAULT_FROM,
            "to": TIMELOCK,
            "input": "0xfe0d94c1",
            "calls": [{"from": TIMELOCK.lower(), "to": TARGET.lower(), "input": CALLDATA, "function_name": "f"}],
        }
    )

    assert find_matching_call(trace, TIMELOCK, TARGET, CALLDATA).function_name == "f"
    assert find_matching_call(trace, TIMELOCK, TARGET, "0xdeadbeef") is None
    assert find_matching_call(None, TIMELOCK, TARGET, CALLDATA) is None


@pytest.mark.asyncio
async def test_decode_calldata():
    trace = {
        "from": DEFAULT_FROM,
        "to": TIMELOCK,
        "calls": [
            {
                "from": TIMELOCK,
                "to": TARGET,
                "input": CALLDATA,
                "contract_name": "UniswapV3Factory",
                "function_name": "setOwner",
                "decoded_input": [{"soltype": {"name": "_owner", "type": "address"}, "value": OTHER}],
            }
        ],
    }
    sim = make_sim(transaction_info={"call_trace": trace})
    proposal = make_proposal(
        targets=(TARGET, RETRYABLE_TICKET_MAGIC, OTHER), values=(0, 0, 0), calldatas=(CALLDATA, "0x", "0x1234")
    )

    result = await CheckDecodeCalldata().check_proposal(proposal, sim, make_deps())

    assert result.info == [
        f"UniswapV3Factory.setOwner(_owner: {OTHER})",
        "Creates a retryable ticket, simulated separately on L2",
    ]
    assert result.warnings == [f"No call from `{TIMELOCK}` to `{OTHER}` with calldata `0x1234` in the trace"]


@pytest.mark.asyncio
async def test_decode_calldata_falls_back_to_known_selectors():
    transfer = "0xa9059cbb" + "00" * 64
    trace = {
        "from": TIMELOCK,
        "to": TARGET,
        "calls": [
            {"from": TIMELOCK, "to": TARGET, "input": transfer},
            {"from": TIMELOCK, "to": OTHER, "input": "0xdeadbeef"},
        ],
    }
    sim = make_sim(transaction_info={"call_trace": trace})
    proposal = make_proposal(targets=(TARGET, OTHER), values=(0, 0), calldatas=(transfer, "0xdeadbeef"))

    result = await CheckDecodeCalldata().check_proposal(proposal, sim, make_deps())

    assert result.warnings == [
        f"`{TARGET}`.transfer(address,uint256) (arguments not decoded)",
        f"Could not decode call to `{OTHER}` with calldata `0xdeadbeef`",
    ]


@pytest.mark.asyncio
async def test_logs_grouped_by_contract():
    logs = [
        {"name": "OwnerChanged", "inputs": [{"value": OTHER}], "raw": {"address": TARGET.lower(), "topics": ["0xaa"]}},
        {"raw": {"address": OTHER.lower(), "topics": ["0xbb"]}},
        {"name": "Second", "inputs": [], "raw": {"address": TARGET.lower(), "topics": ["0xcc"]}},
    ]
    sim = make_sim(transaction_info={"logs": logs})

    result = await CheckLogs().check_proposal(make_proposal(), sim, make_deps())

    assert result.info == [f"`{TARGET}`: `OwnerChanged({OTHER})`", f"`{TARGET}`: `Second()`"]
    assert result.warnings == [f"`{OTHER}`: undecoded event with topic `0xbb`"]


@pytest.mark.asyncio
async def test_no_logs_and_no_state_changes():
    deps = make_deps()

    logs = await CheckLogs().check_proposal(make_proposal(), make_sim(), deps)
    state = await CheckStateChanges().check_proposal(make_proposal(), make_sim(), deps)

    assert logs.info == ["No events emitted"]
    assert state.info == ["No state changes"]


@pytest.mark.asyncio
async def test_state_changes():
    diffs = [
        {"address": TARGET.lower(), "soltype": {"name": "owner"}, "original": TIMELOCK, "dirty": OTHER},
        {"raw": [{"address": OTHER.lower(), "key": "0x01", "original": "0x00", "dirty": "0x02"}]},
    ]
    sim = make_sim(transaction_info={"state_diff": diffs})

    result = await CheckStateChanges().check_proposal(make_proposal(), sim, make_deps())

    assert result.info == [
        f"`{TARGET}`: `owner` changed from `{TIMELOCK}` to `{OTHER}`",
        f"`{OTHER}`: slot `0x01` changed from `0x00` to `0x02`",
    ]


@pytest.mark.asyncio
async def test_value_required():
    check = CheckValueRequired()

    none_needed = await check.check_proposal(make_proposal(), make_sim(), make_deps())
    funded = await check.check_proposal(make_proposal(values=(10**18,)), make_sim(), make_deps(balance=2 * 10**18))
    short = await check.check_proposal(make_proposal(values=(10**18,)), make_sim(), make_deps(balance=0))

    assert none_needed.info == ["No ETH is required to execute this proposal"]
    assert funded.warnings == ["Executing this proposal requires 1 ETH to be sent with the call"]
    assert funded.info == [f"Executor `{TIMELOCK}` holds 2 ETH"]
    assert len(short.warnings) == 2


class ExplodingCheck(ProposalCheck):
    name = "Explodes"

    async def check_proposal(self, proposal, sim, deps):
        raise RuntimeError("boom")


class PassingCheck(ProposalCheck):
    name = "Passes"

    async def check_proposal(self, proposal, sim, deps):
        return CheckResult(info=["ok"])


@pytest.mark.asyncio
async def test_run_checks_isolates_failures():
    checks = {"explodes": ExplodingCheck(), "passes": PassingCheck()}

    results = await run_checks(make_proposal(), make_sim(), make_deps(), checks=checks)

    assert list(results) == ["explodes", "passes"]
    assert results["explodes"].result.errors == ["Check failed to run: RuntimeError: boom"]
    assert results["passes"].result.passed


def test_all_checks_order():
    assert list(ALL_CHECKS) == [
        "check_simulation_status",
        "check_targets_verified",
        "check_touched_contracts_verified",
        "check_targets_no_selfdestruct",
        "check_touched_contracts_no_selfdestruct",
        "check_decode_calldata",
        "check_logs",
        "check_state_changes",
        "check_value_required",
    ]
