from checks.base import ProposalCheck
from checks.common import sim_block
from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import TenderlySimulation
from utils.formatter_utils import format_wei


class CheckValueRequired(ProposalCheck):
    name = "Reports on whether the caller needs to send ETH with the call"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        result = CheckResult()
        total_value = sum(proposal.values)
        if total_value == 0:
            result.info.append("No ETH is required to execute this proposal")
            return result

        result.warnings.append(f"Executing this proposal requires {format_wei(total_value)} to be sent with the call")
        balance = await deps.w3.eth.get_balance(deps.executor, block_identifier=sim_block(sim))
        if balance >= total_value:
            result.info.append(f"Executor `{deps.executor}` holds {format_wei(balance)}")
        else:
            result.warnings.append(
                f"Executor `{deps.executor}` holds only {format_wei(balance)}, the caller must send the difference"
            )
        return result
