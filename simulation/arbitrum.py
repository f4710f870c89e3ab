"""
Cross-chain expansion of Arbitrum governance proposals.

An Arbitrum core proposal executes on L2 by calling ``ArbSys.sendTxToL1`` with a
``schedule``/``scheduleBatch`` call for the L1 timelock. Once that batch runs on
L1, every action aimed at ``RETRYABLE_TICKET_MAGIC`` becomes a retryable ticket
that executes on Arbitrum One or Nova. Each leg is simulated on its own chain.
"""

from typing import List, NamedTuple, Union

from eth_abi import decode
from eth_utils import to_bytes, to_hex

from constants.arbitrum import ARB_SYS, INBOX_CHAIN_IDS, L1_TO_L2_ALIAS_OFFSET, RETRYABLE_TICKET_MAGIC
from constants.contract_function_selectors import (
    ARB_SYS_SEND_TX_TO_L1_SIGNATURE,
    RETRYABLE_TICKET_PAYLOAD_TYPES,
    TIMELOCK_SCHEDULE_BATCH_SIGNATURE,
    TIMELOCK_SCHEDULE_SIGNATURE,
)
from models.proposal import ProposalEvent
from models.simulation_config import (
    GovernorType,
    SimulationConfig,
    SimulationConfigArbL2ToL1,
    SimulationConfigArbRetryable,
)
from utils.abi_utils import calldata_selector, decode_function_call, function_selector
from utils.exceptions import CalldataDecodeError
from utils.formatter_utils import to_normalized_address
from utils.logger_utils import get_logger

logger = get_logger("Arbitrum Expansion")


class L2ToL1Message(NamedTuple):
    destination: str
    data: str


class ScheduledBatch(NamedTuple):
    targets: List[str]
    values: List[int]
    payloads: List[str]
    predecessor: str
    salt: str
    delay: int


class RetryableTicket(NamedTuple):
    inbox: str
    l2_target: str
    l2_value: int
    gas_limit: int
    max_fee_per_gas: int
    data: str


def apply_l1_to_l2_alias(address: str) -> str:
    """Address an L1 contract appears as on L2 when it sends a retryable ticket."""
    aliased = (int(address, 16) + L1_TO_L2_ALIAS_OFFSET) % 2**160
    return to_normalized_address("0x" + aliased.to_bytes(20, "big").hex())


def decode_send_tx_to_l1(calldata: str) -> L2ToL1Message:
    destination, data = decode_function_call(ARB_SYS_SEND_TX_TO_L1_SIGNATURE, calldata)
    return L2ToL1Message(destination=to_normalized_address(destination), data=to_hex(data))


def decode_timelock_schedule(calldata: str) -> ScheduledBatch:
    """Decodes ``schedule`` or ``scheduleBatch``; a single schedule becomes a batch of one."""
    selector = calldata_selector(calldata)
    if selector == function_selector(TIMELOCK_SCHEDULE_BATCH_SIGNATURE):
        targets, values, payloads, predecessor, salt, delay = decode_function_call(
            TIMELOCK_SCHEDULE_BATCH_SIGNATURE, calldata
        )
        return ScheduledBatch(
            targets=[to_normalized_address(target) for target in targets],
            values=list(values),
            payloads=[to_hex(payload) for payload in payloads],
            predecessor=to_hex(predecessor),
            salt=to_hex(salt),
            delay=delay,
        )
    if selector == function_selector(TIMELOCK_SCHEDULE_SIGNATURE):
        target, value, payload, predecessor, salt, delay = decode_function_call(TIMELOCK_SCHEDULE_SIGNATURE, calldata)
        return ScheduledBatch(
            targets=[to_normalized_address(target)],
            values=[value],
            payloads=[to_hex(payload)],
            predecessor=to_hex(predecessor),
            salt=to_hex(salt),
            delay=delay,
        )
    raise CalldataDecodeError(f"L1 message with selector {selector} is not a timelock schedule call")


def decode_retryable_payload(payload: str) -> RetryableTicket:
    try:
        inbox, l2_target, l2_value, gas_limit, max_fee_per_gas, data = decode(
            RETRYABLE_TICKET_PAYLOAD_TYPES, to_bytes(hexstr=payload)
        )
    except Exception as e:
        raise CalldataDecodeError(f"Could not decode retryable ticket payload: {e}") from e
    return RetryableTicket(
        inbox=to_normalized_address(inbox),
        l2_target=to_normalized_address(l2_target),
        l2_value=l2_value,
        gas_limit=gas_limit,
        max_fee_per_gas=max_fee_per_gas,
        data=to_hex(data),
    )


def chain_id_for_inbox(inbox: str) -> int:
    chain_id = INBOX_CHAIN_IDS.get(to_normalized_address(inbox))
    if chain_id is None:
        raise CalldataDecodeError(f"Retryable ticket sent to unknown inbox {inbox}")
    return chain_id


def _is_send_tx_to_l1(target: str, calldata: str) -> bool:
    return target == ARB_SYS and calldata_selector(calldata) == function_selector(ARB_SYS_SEND_TX_TO_L1_SIGNATURE)


def expand_arbitrum_config(
    config: SimulationConfig, proposal: ProposalEvent
) -> List[Union[SimulationConfigArbL2ToL1, SimulationConfigArbRetryable]]:
    """
    Derives the L1 and retryable legs of an Arbitrum proposal. ``id_offset`` numbers
    the derived simulations in the order they execute, starting at 1.
    """
    if config.governor_type != GovernorType.ARB:
        return []

    parent_id = proposal.identifier
    derived: List[Union[SimulationConfigArbL2ToL1, SimulationConfigArbRetryable]] = []
    id_offset = 0

    for target, calldata in zip(proposal.targets, proposal.calldatas):
        if not _is_send_tx_to_l1(target, calldata):
            continue

        message = decode_send_tx_to_l1(calldata)
        batch = decode_timelock_schedule(message.data)
        id_offset += 1
        derived.append(
            SimulationConfigArbL2ToL1(
                dao_name=config.dao_name,
                governor_address=message.destination,
                governor_type=GovernorType.ARB,
                targets=batch.targets,
                values=batch.values,
                signatures=[""] * len(batch.targets),
                calldatas=batch.payloads,
                description=proposal.description,
                parent_id=parent_id,
                id_offset=id_offset,
                predecessor=batch.predecessor,
                salt=batch.salt,
            )
        )

        l2_sender = apply_l1_to_l2_alias(message.destination)
        for l1_target, payload in zip(batch.targets, batch.payloads):
            if l1_target != RETRYABLE_TICKET_MAGIC:
                continue
            ticket = decode_retryable_payload(payload)
            id_offset += 1
            derived.append(
                SimulationConfigArbRetryable(
                    dao_name=config.dao_name,
                    governor_address=message.destination,
                    governor_type=GovernorType.ARB,
                    targets=[ticket.l2_target],
                    values=[ticket.l2_value],
                    signatures=[""],
                    calldatas=[ticket.data],
                    description=proposal.description,
                    parent_id=parent_id,
                    id_offset=id_offset,
                    from_=l2_sender,
                    chain_id=chain_id_for_inbox(ticket.inbox),
                )
            )

    logger.info(f"Proposal {parent_id} expands into {len(derived)} cross-chain simulation(s)")
    return derived
