from typing import Dict, Optional

from checks.base import ProposalCheck
from checks.check_decode_calldata import CheckDecodeCalldata
from checks.check_logs import CheckLogs
from checks.check_selfdestruct import CheckTargetsNoSelfdestruct, CheckTouchedContractsNoSelfdestruct
from checks.check_simulation_status import CheckSimulationStatus
from checks.check_state_changes import CheckStateChanges
from checks.check_targets_verified import CheckTargetsVerified, CheckTouchedContractsVerified
from checks.check_value_required import CheckValueRequired
from models.check import AllCheckResults, CheckReport, CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import TenderlySimulation
from utils.async_utils import gather_with_concurrency
from utils.logger_utils import get_logger

logger = get_logger("Check Runner")

# Report order
ALL_CHECKS: Dict[str, ProposalCheck] = {
    "check_simulation_status": CheckSimulationStatus(),
    "check_targets_verified": CheckTargetsVerified(),
    "check_touched_contracts_verified": CheckTouchedContractsVerified(),
    "check_targets_no_selfdestruct": CheckTargetsNoSelfdestruct(),
    "check_touched_contracts_no_selfdestruct": CheckTouchedContractsNoSelfdestruct(),
    "check_decode_calldata": CheckDecodeCalldata(),
    "check_logs": CheckLogs(),
    "check_state_changes": CheckStateChanges(),
    "check_value_required": CheckValueRequired(),
}


async def run_check(
    check_id: str, check: ProposalCheck, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
) -> CheckReport:
    logger.debug(f"Running check {check_id}")
    try:
        result = await check.check_proposal(proposal, sim, deps)
    except Exception as e:
        # Recorded as a failure of this check only
        logger.exception(f"Check {check_id} failed on proposal {proposal.identifier}")
        result = CheckResult(errors=[f"Check failed to run: {type(e).__name__}: {e}"])
    return CheckReport(name=check.name, result=result)


async def run_checks(
    proposal: ProposalEvent,
    sim: TenderlySimulation,
    deps: ProposalData,
    max_concurrency: int = 4,
    checks: Optional[Dict[str, ProposalCheck]] = None,
) -> AllCheckResults:
    checks = checks if checks is not None else ALL_CHECKS
    reports = await gather_with_concurrency(
        max_concurrency,
        *(run_check(check_id, check, proposal, sim, deps) for check_id, check in checks.items()),
    )
    results = dict(zip(checks.keys(), reports))

    failed = [check_id for check_id, report in results.items() if not report.result.passed]
    if failed:
        logger.warning(f"Proposal {proposal.identifier}: {len(failed)} check(s) failed: {', '.join(failed)}")
    else:
        logger.info(f"Proposal {proposal.identifier}: all {len(results)} checks passed")
    return results
