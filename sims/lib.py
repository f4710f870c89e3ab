from constants.arbitrum import ARB_SYS, L2_CORE_GOVERNOR
from models.simulation_config import GovernorType, SimulationConfigNew


def generate_non_emergency_sc_sim_config(calldata: str, description: str) -> SimulationConfigNew:
    """
    Config for a non-emergency Security Council proposal: a single
    ``ArbSys.sendTxToL1`` call proposed through the Arbitrum Core Governor.
    """
    return SimulationConfigNew(
        dao_name="Arbitrum",
        governor_address=L2_CORE_GOVERNOR,
        governor_type=GovernorType.ARB,
        targets=[ARB_SYS],
        values=[0],
        signatures=[""],
        calldatas=[calldata],
        description=description,
    )
