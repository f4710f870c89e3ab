from sims.lib import generate_non_emergency_sc_sim_config

# Proposal data from the Arbitrum Foundation governance repository:
# https://github.com/ArbitrumFoundation/governance/blob/b5e97139e5f9907f80d2fa34f97c8f624c8dc83d/scripts/proposals/AtlasFeesAIP/atlais-aip-data.json
ATLAS_FEES_CALLDATA = (
    "0x928c169a000000000000000000000000e6841d92b0c345144506576ec13ecf5103ac7f490000000000000000000000"
    "000000000000000000000000000000000000000040000000000000000000000000000000000000000000000000000000"
    "00000005248f2a0bb000000000000000000000000000000000000000000000000000000000000000c000000000000000"
    "000000000000000000000000000000000000000000000001200000000000000000000000000000000000000000000000"
    "0000000000000001800000000000000000000000000000000000000000000000000000000000000000d82fcbd0c53e9e"
    "9c1cfc7e0f2301f003ca89fc35b3bcf7e105d5e9d9906b831b0000000000000000000000000000000000000000000000"
    "00000000000003f480000000000000000000000000000000000000000000000000000000000000000200000000000000"
    "0000000000a723c008e76e379c55599d2e4d93879beafda79c000000000000000000000000a723c008e76e379c55599d"
    "2e4d93879beafda79c000000000000000000000000000000000000000000000000000000000000000200000000000000"
    "000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000"
    "000000000000000000000000000000000000000000000000000000000000000000000000000000000200000000000000"
    "000000000000000000000000000000000000000000000000400000000000000000000000000000000000000000000000"
    "0000000000000001e0000000000000000000000000000000000000000000000000000000000000018000000000000000"
    "00000000004dbd4fc535ac27206064b68ffcf827b0a60bab3f000000000000000000000000cf57572261c7c2bcf21ffd"
    "220ea7d1a27d40a827000000000000000000000000000000000000000000000000000000000000000000000000000000"
    "000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000"
    "00000000000000000000000000000000000000000000000000000000000000000000000000000000c000000000000000"
    "000000000000000000000000000000000000000000000000841cff79cd00000000000000000000000036d0170d92f66e"
    "8949eb276c3ac4fea64f83704d0000000000000000000000000000000000000000000000000000000000000040000000"
    "0000000000000000000000000000000000000000000000000000000004b147f40c000000000000000000000000000000"
    "000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000"
    "000000000000000000000000000000000000000000000001800000000000000000000000004dbd4fc535ac27206064b6"
    "8ffcf827b0a60bab3f000000000000000000000000cf57572261c7c2bcf21ffd220ea7d1a27d40a82700000000000000"
    "000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000"
    "000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000"
    "000000000000000000000000000000000000000000000000c00000000000000000000000000000000000000000000000"
    "0000000000000000841cff79cd000000000000000000000000849e360a247132f961c9cbe95ba39106c72e1268000000"
    "000000000000000000000000000000000000000000000000000000004000000000000000000000000000000000000000"
    "00000000000000000000000004b147f40c00000000000000000000000000000000000000000000000000000000000000"
    "000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000"
    "0000000000"
)

config = generate_non_emergency_sc_sim_config(ATLAS_FEES_CALLDATA, "atlas fees sim")
