from checks.base import ProposalCheck
from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import TenderlySimulation


class CheckSimulationStatus(ProposalCheck):
    name = "Simulation executes successfully"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        result = CheckResult()
        if sim.simulation.status:
            result.info.append("Transaction executed successfully")
        else:
            result.errors.append(f"Transaction reverted: {sim.revert_reason or 'no revert reason'}")
        return result
