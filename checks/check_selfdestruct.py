from typing import Iterable

from checks.base import ProposalCheck
from checks.common import (
    EMPTY,
    EOA,
    HAS_DELEGATECALL,
    HAS_SELFDESTRUCT,
    TRUSTED,
    bytecode_status,
    sim_block,
    unique_addresses,
)
from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import TenderlySimulation


async def check_no_selfdestructs(addresses: Iterable[str], sim: TenderlySimulation, deps: ProposalData) -> CheckResult:
    result = CheckResult()
    for address in unique_addresses(addresses):
        status = await bytecode_status(address, deps.w3, deps.trusted_addresses, sim_block(sim))
        if status == TRUSTED:
            result.info.append(f"{address}: Trusted contract (not checked)")
        elif status == EOA:
            result.info.append(f"{address}: EOA")
        elif status == EMPTY:
            result.warnings.append(f"{address}: EOA (may have code later)")
        elif status == HAS_SELFDESTRUCT:
            result.errors.append(f"{address}: Contract (with SELFDESTRUCT)")
        elif status == HAS_DELEGATECALL:
            result.warnings.append(f"{address}: Contract (with DELEGATECALL)")
        else:
            result.info.append(f"{address}: Contract (looks safe)")
    return result


class CheckTargetsNoSelfdestruct(ProposalCheck):
    name = "Targets do not contain SELFDESTRUCT"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        return await check_no_selfdestructs(proposal.targets, sim, deps)


class CheckTouchedContractsNoSelfdestruct(ProposalCheck):
    name = "Touched contracts do not contain SELFDESTRUCT"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        return await check_no_selfdestructs(sim.transaction.addresses, sim, deps)
