from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from web3 import AsyncWeb3

from checks.runner import run_checks
from clients.tenderly_client import TenderlyClient
from clients.web3_clients import Web3Clients
from config.settings import settings
from governor.governor import get_governor, get_proposal_ids, get_proposal_state
from models.check import AllCheckResults
from models.proposal import LIVE_PROPOSAL_STATES, ProposalState
from models.simulation import SimulationData
from models.simulation_config import (
    GovernorType,
    SimulationConfig,
    SimulationConfigExecuted,
    SimulationConfigProposed,
)
from presentation.report import write_report
from simulation.arbitrum import expand_arbitrum_config
from simulation.simulate import simulate
from utils.logger_utils import get_logger

logger = get_logger("Simulation Runner")

SimulationReport = Tuple[SimulationData, AllCheckResults]


async def run_simulation(
    config: SimulationConfig,
    clients: Web3Clients,
    tenderly: TenderlyClient,
    reports_dir: Optional[Union[str, Path]] = None,
    max_concurrent_checks: Optional[int] = None,
) -> SimulationReport:
    """Simulates one config, runs every check on the result and writes the report."""
    result, deps = await simulate(config, clients, tenderly)
    checks = await run_checks(
        result.proposal,
        result.sim,
        deps,
        max_concurrent_checks or settings.simulation.max_concurrent_checks,
    )
    data = SimulationData(sim=result.sim, proposal=result.proposal, latest_block=result.latest_block, config=config)
    write_report(data, checks, reports_dir or settings.simulation.reports_dir)
    return data, checks


async def run_simulations(
    configs: Sequence[SimulationConfig],
    clients: Web3Clients,
    tenderly: TenderlyClient,
    expand_arbitrum: bool = True,
    reports_dir: Optional[Union[str, Path]] = None,
    max_concurrent_checks: Optional[int] = None,
) -> List[SimulationReport]:
    """
    Runs configs one after another. With ``expand_arbitrum``, each Arbitrum
    proposal is followed by its L1 and retryable legs.
    """
    reports: List[SimulationReport] = []
    for config in configs:
        data, checks = await run_simulation(config, clients, tenderly, reports_dir, max_concurrent_checks)
        reports.append((data, checks))

        if not expand_arbitrum or config.type in ("arbl2tol1", "arbretryable"):
            continue
        for derived in expand_arbitrum_config(config, data.proposal):
            reports.append(await run_simulation(derived, clients, tenderly, reports_dir, max_concurrent_checks))

    failed = sum(1 for _, checks in reports if any(not report.result.passed for report in checks.values()))
    logger.info(f"Simulated {len(reports)} proposal(s), {failed} with failing checks")
    return reports


async def build_governor_sim_configs(
    dao_name: str,
    governor_address: str,
    governor_type: GovernorType,
    w3: AsyncWeb3,
    include_executed: bool = False,
    from_block: int = 0,
) -> List[SimulationConfig]:
    """
    One config per proposal of a governor: ``proposed`` for proposals that can
    still execute, ``executed`` for executed ones when ``include_executed`` is set.
    """
    governor = get_governor(governor_type, governor_address, w3)
    configs: List[SimulationConfig] = []
    for proposal_id in await get_proposal_ids(governor_type, governor, from_block):
        state = await get_proposal_state(governor, proposal_id)
        common = dict(
            dao_name=dao_name, governor_address=governor_address, governor_type=governor_type, proposal_id=proposal_id
        )
        if state in LIVE_PROPOSAL_STATES:
            configs.append(SimulationConfigProposed(**common))
        elif state == ProposalState.EXECUTED and include_executed:
            configs.append(SimulationConfigExecuted(**common))
        else:
            logger.debug(f"Skipping proposal {proposal_id} in state {state.name}")
    logger.info(f"Governor {governor_address}: {len(configs)} proposal(s) to simulate")
    return configs
