from typing import Iterable

from checks.base import ProposalCheck
from checks.common import EOA, VERIFIED, unique_addresses, verification_status
from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import TenderlySimulation


async def check_verification(addresses: Iterable[str], sim: TenderlySimulation, deps: ProposalData) -> CheckResult:
    result = CheckResult()
    for address in unique_addresses(addresses):
        status = await verification_status(sim, address, deps.w3)
        if status == EOA:
            result.info.append(f"{address}: EOA (verification not applicable)")
        elif status == VERIFIED:
            result.info.append(f"{address}: Contract (verified)")
        else:
            result.warnings.append(f"{address}: Contract (not verified)")
    return result


class CheckTargetsVerified(ProposalCheck):
    name = "All targets are verified on Etherscan"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        return await check_verification(proposal.targets, sim, deps)


class CheckTouchedContractsVerified(ProposalCheck):
    name = "All touched contracts are verified on Etherscan"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        return await check_verification(sim.transaction.addresses, sim, deps)
