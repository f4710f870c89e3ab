from typing import Optional

from checks.base import ProposalCheck
from checks.common import format_inputs
from constants.arbitrum import RETRYABLE_TICKET_MAGIC
from constants.contract_function_selectors import get_function_signature
from governor.governor import build_call_datas
from models.check import CheckResult
from models.proposal import ProposalData, ProposalEvent
from models.tenderly import CallTrace, TenderlySimulation
from utils.abi_utils import calldata_selector
from utils.formatter_utils import format_wei, to_normalized_address


def find_matching_call(call_trace: Optional[CallTrace], sender: str, target: str, calldata: str) -> Optional[CallTrace]:
    """First call in the trace from ``sender`` to ``target`` carrying ``calldata``."""
    if call_trace is None:
        return None
    sender, target, calldata = sender.lower(), target.lower(), calldata.lower()
    for call in call_trace.walk():
        if (call.from_ or "").lower() != sender or (call.to or "").lower() != target:
            continue
        if (call.input or "").lower() == calldata:
            return call
    return None


def describe_call(call: CallTrace, target: str, value: int) -> str:
    contract = call.contract_name or f"`{target}`"
    description = f"{contract}.{call.function_name}({format_inputs(call.decoded_input)})"
    if value:
        description += f" with {format_wei(value)}"
    return description


class CheckDecodeCalldata(ProposalCheck):
    name = "Calldata is decoded"

    async def check_proposal(
        self, proposal: ProposalEvent, sim: TenderlySimulation, deps: ProposalData
    ) -> CheckResult:
        result = CheckResult()
        call_trace = sim.transaction.transaction_info.call_trace
        call_datas = build_call_datas(proposal.signatures, proposal.calldatas)

        for target, value, calldata in zip(proposal.targets, proposal.values, call_datas):
            target = to_normalized_address(target)
            if target == RETRYABLE_TICKET_MAGIC:
                result.info.append("Creates a retryable ticket, simulated separately on L2")
                continue

            call = find_matching_call(call_trace, deps.executor, target, calldata)
            if call is None:
                result.warnings.append(
                    f"No call from `{deps.executor}` to `{target}` with calldata `{calldata}` in the trace"
                )
            elif not call.function_name:
                signature = get_function_signature(calldata_selector(calldata))
                if signature == "Unknown":
                    result.warnings.append(f"Could not decode call to `{target}` with calldata `{calldata}`")
                else:
                    # Unverified target, the selector is still a known one
                    result.warnings.append(f"`{target}`.{signature} (arguments not decoded)")
            else:
                result.info.append(describe_call(call, target, value))
        return result
