from typing import Any, Dict

from eth_utils import to_hex
from pydantic import BaseModel, ConfigDict

from models.proposal import ProposalEvent
from models.simulation_config import SimulationConfig
from models.tenderly import TenderlySimulation


class LatestBlock(BaseModel):
    """The block the simulation was anchored to."""

    number: int
    timestamp: int
    hash: str = ""

    @classmethod
    def from_web3_block(cls, block: Dict[str, Any]) -> "LatestBlock":
        block_hash = block.get("hash")
        if isinstance(block_hash, (bytes, bytearray)):
            block_hash = to_hex(block_hash)
        return cls(number=block["number"], timestamp=block["timestamp"], hash=block_hash or "")


class SimulationResult(BaseModel):
    sim: TenderlySimulation
    proposal: ProposalEvent
    latest_block: LatestBlock


class SimulationData(SimulationResult):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: SimulationConfig
