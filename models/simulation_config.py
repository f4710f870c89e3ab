from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, model_validator

from constants.constants import ZERO_BYTES32
from utils.formatter_utils import to_big_int, to_bytes32_hex, to_hex_data, to_normalized_address

# BigNumberish: accepts ints, decimal strings and 0x hex strings
BigNumberish = Annotated[int, BeforeValidator(to_big_int)]
Address = Annotated[str, BeforeValidator(to_normalized_address)]
HexData = Annotated[str, BeforeValidator(to_hex_data)]
Bytes32 = Annotated[str, BeforeValidator(to_bytes32_hex)]


class GovernorType(str, Enum):
    OZ = "oz"
    BRAVO = "bravo"
    ARB = "arb"


class SimulationConfigBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dao_name: str = Field(alias="daoName")  # e.g. 'Compound' or 'Uniswap'
    governor_address: Address = Field(alias="governorAddress")
    governor_type: GovernorType = Field(alias="governorType")


class SimulationConfigExecuted(SimulationConfigBase):
    type: Literal["executed"] = "executed"
    proposal_id: BigNumberish = Field(alias="proposalId")


class SimulationConfigProposed(SimulationConfigBase):
    type: Literal["proposed"] = "proposed"
    proposal_id: BigNumberish = Field(alias="proposalId")


class ProposalActionsMixin(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    targets: List[Address]
    values: List[BigNumberish]
    signatures: List[str]
    calldatas: List[HexData]
    description: str

    @model_validator(mode="after")
    def _check_action_lengths(self):
        lengths = {len(self.targets), len(self.values), len(self.signatures), len(self.calldatas)}
        if len(lengths) != 1:
            raise ValueError(
                "targets, values, signatures and calldatas must have the same length, got "
                f"{len(self.targets)}/{len(self.values)}/{len(self.signatures)}/{len(self.calldatas)}"
            )
        return self

    @property
    def total_value(self) -> int:
        return sum(self.values)


class SimulationConfigNew(ProposalActionsMixin, SimulationConfigBase):
    type: Literal["new"] = "new"


class SimulationConfigArbL2ToL1(ProposalActionsMixin, SimulationConfigBase):
    """
    The L1 leg of an Arbitrum proposal: the batch the L1 timelock executes once the
    L2 -> L1 message has been scheduled. ``governor_address`` is the L1 timelock.
    """

    type: Literal["arbl2tol1"] = "arbl2tol1"
    parent_id: BigNumberish = Field(alias="parentId")
    id_offset: BigNumberish = Field(alias="idoffset")
    predecessor: Bytes32 = ZERO_BYTES32
    salt: Bytes32 = ZERO_BYTES32


class SimulationConfigArbRetryable(ProposalActionsMixin, SimulationConfigBase):
    """
    The L2 leg created by a retryable ticket. ``from_`` is the aliased L1 sender
    and ``chain_id`` selects Arbitrum One or Nova.
    """

    type: Literal["arbretryable"] = "arbretryable"
    parent_id: BigNumberish = Field(alias="parentId")
    id_offset: BigNumberish = Field(alias="idoffset")
    from_: Address = Field(alias="from")
    chain_id: Literal[42161, 42170] = Field(alias="chainId")

    @model_validator(mode="after")
    def _check_single_action(self):
        if len(self.targets) != 1:
            raise ValueError(f"A retryable ticket carries exactly one call, got {len(self.targets)}")
        return self


SimulationConfig = Annotated[
    Union[
        SimulationConfigExecuted,
        SimulationConfigProposed,
        SimulationConfigNew,
        SimulationConfigArbL2ToL1,
        SimulationConfigArbRetryable,
    ],
    Field(discriminator="type"),
]

SIMULATION_CONFIG_ADAPTER = TypeAdapter(SimulationConfig)


def parse_simulation_config(data: Union[str, bytes, dict]) -> SimulationConfig:
    """Validates a config given as a dict or a JSON document."""
    if isinstance(data, (str, bytes)):
        return SIMULATION_CONFIG_ADAPTER.validate_json(data)
    return SIMULATION_CONFIG_ADAPTER.validate_python(data)
