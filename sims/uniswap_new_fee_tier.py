from constants.constants import UNISWAP_GOVERNOR_BRAVO, UNISWAP_V3_FACTORY
from models.simulation_config import GovernorType, SimulationConfigNew

# enableFeeAmount(100, 1): a 0.01% fee tier with tick spacing 1
FEE_AMOUNT = 100
TICK_SPACING = 1

config = SimulationConfigNew(
    dao_name="Uniswap",
    governor_address=UNISWAP_GOVERNOR_BRAVO,
    governor_type=GovernorType.BRAVO,
    targets=[UNISWAP_V3_FACTORY],
    values=[0],
    signatures=["enableFeeAmount(uint24,int24)"],
    calldatas=["0x" + f"{FEE_AMOUNT:064x}" + f"{TICK_SPACING:064x}"],
    description="# Deploy a 1bp fee tier on Uniswap V3\n\nEnables fee amount 100 with tick spacing 1 on the V3 factory.",
)
