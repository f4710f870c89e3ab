from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import TenderlySimulation


class ProposalCheck(object):
    """
    A named inspection of a simulated proposal. Subclasses override ``check_proposal``.
    """

    name = ""

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        raise NotImplementedError()
