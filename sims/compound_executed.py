from constants.constants import COMPOUND_GOVERNOR_BRAVO
from models.simulation_config import GovernorType, SimulationConfigExecuted

config = SimulationConfigExecuted(
    dao_name="Compound",
    governor_address=COMPOUND_GOVERNOR_BRAVO,
    governor_type=GovernorType.BRAVO,
    proposal_id=117,
)
