from typing import Dict, List

from checks.base import ProposalCheck
from checks.common import contract_label, format_inputs
from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import Log, TenderlySimulation
from utils.formatter_utils import to_normalized_address


class CheckLogs(ProposalCheck):
    name = "Reports all events emitted from the proposal"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        result = CheckResult()
        logs = sim.transaction.transaction_info.logs or []
        if not logs:
            result.info.append("No events emitted")
            return result

        # insertion order keeps the emission order of the first log per contract
        by_contract: Dict[str, List[Log]] = {}
        for log in logs:
            by_contract.setdefault(to_normalized_address(log.raw.address), []).append(log)

        for address, contract_logs in by_contract.items():
            label = contract_label(sim, address)
            for log in contract_logs:
                if log.name:
                    result.info.append(f"{label}: `{log.name}({format_inputs(log.inputs)})`")
                else:
                    topic = log.raw.topics[0] if log.raw.topics else "anonymous"
                    result.warnings.append(f"{label}: undecoded event with topic `{topic}`")
        return result
