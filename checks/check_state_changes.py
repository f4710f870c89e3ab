from typing import Dict, List

from checks.base import ProposalCheck
from checks.common import contract_label, format_value
from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import StateDiff, TenderlySimulation
from utils.formatter_utils import to_normalized_address


def describe_state_diff(diff: StateDiff) -> List[str]:
    if diff.soltype is not None and diff.soltype.name:
        return [f"`{diff.soltype.name}` changed from `{format_value(diff.original)}` to `{format_value(diff.dirty)}`"]
    return [f"slot `{raw.key}` changed from `{raw.original}` to `{raw.dirty}`" for raw in diff.raw or []]


class CheckStateChanges(ProposalCheck):
    name = "Reports all state changes from the proposal"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        result = CheckResult()
        diffs = sim.transaction.transaction_info.state_diff or []

        by_contract: Dict[str, List[StateDiff]] = {}
        for diff in diffs:
            address = diff.contract_address
            if address is None:
                continue
            by_contract.setdefault(to_normalized_address(address), []).append(diff)

        if not by_contract:
            result.info.append("No state changes")
            return result

        for address, contract_diffs in by_contract.items():
            label = contract_label(sim, address)
            for diff in contract_diffs:
                for change in describe_state_diff(diff):
                    result.info.append(f"{label}: {change}")
        return result
