from enum import IntEnum
from typing import Any, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.simulation_config import Address, BigNumberish, HexData


class ProposalState(IntEnum):
    """Return values of ``state(proposalId)``, shared by Bravo and OpenZeppelin governors."""

    PENDING = 0
    ACTIVE = 1
    CANCELED = 2
    DEFEATED = 3
    SUCCEEDED = 4
    QUEUED = 5
    EXPIRED = 6
    EXECUTED = 7


# States in which a proposal can still be executed
LIVE_PROPOSAL_STATES = (
    ProposalState.PENDING,
    ProposalState.ACTIVE,
    ProposalState.SUCCEEDED,
    ProposalState.QUEUED,
)


class ProposalActions(NamedTuple):
    # Same order as the outputs of Bravo getActions()
    targets: List[str]
    values: List[int]
    signatures: List[str]
    calldatas: List[str]


class ProposalStruct(BaseModel):
    """On-chain proposal record, normalized across governor flavours."""

    model_config = ConfigDict(populate_by_name=True)

    id: BigNumberish
    proposer: Optional[Address] = None
    eta: BigNumberish = 0
    start_block: Optional[BigNumberish] = None  # OZ: proposalSnapshot
    end_block: Optional[BigNumberish] = None  # OZ: proposalDeadline
    for_votes: BigNumberish = 0
    against_votes: BigNumberish = 0
    abstain_votes: BigNumberish = 0
    canceled: bool = False
    executed: bool = False


class ProposalEvent(BaseModel):
    """A ``ProposalCreated`` event, or the equivalent built for a simulated proposal."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[BigNumberish] = None  # Bravo governor
    proposal_id: Optional[BigNumberish] = Field(None, alias="proposalId")  # OZ governor
    proposer: Address
    start_block: BigNumberish = Field(alias="startBlock")
    end_block: BigNumberish = Field(alias="endBlock")
    description: str
    targets: List[Address]
    values: List[BigNumberish]
    signatures: List[str]
    calldatas: List[HexData]
    chainid: str = "1"

    @property
    def identifier(self) -> int:
        identifier = self.id if self.id is not None else self.proposal_id
        if identifier is None:
            raise ValueError("Proposal event has neither id nor proposalId")
        return identifier

    @property
    def title(self) -> str:
        """First line of the description without markdown heading marks."""
        first_line = self.description.strip().splitlines()[0] if self.description.strip() else ""
        return first_line.lstrip("#").strip() or f"Proposal {self.identifier}"


class ProposalData(BaseModel):
    """
    Dependencies handed to every proposal check.

    ``executor`` is the account whose outgoing calls are the proposal's actions:
    the timelock for governor proposals, the aliased L1 timelock for retryables.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    governor: Optional[Any] = None
    timelock: Optional[Any] = None
    w3: Any
    executor: Address
    chain_id: int = 1

    @property
    def trusted_addresses(self) -> List[str]:
        addresses = [self.executor]
        for contract in (self.governor, self.timelock):
            if contract is not None:
                addresses.append(contract.address)
        return addresses
