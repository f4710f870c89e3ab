from eth_utils import to_checksum_address

# --- Chains ---
MAINNET_CHAIN_ID = 1
ARB_ONE_CHAIN_ID = 42161
ARB_NOVA_CHAIN_ID = 42170

CHAIN_NAMES = {
    MAINNET_CHAIN_ID: "Mainnet",
    ARB_ONE_CHAIN_ID: "Arbitrum",
    ARB_NOVA_CHAIN_ID: "Nova",
}

BLOCK_EXPLORERS = {
    MAINNET_CHAIN_ID: "https://etherscan.io",
    ARB_ONE_CHAIN_ID: "https://arbiscan.io",
    ARB_NOVA_CHAIN_ID: "https://nova.arbiscan.io",
}

# --- Simulation defaults ---
# Arbitrary EOA with no on-chain history, used as the sender of simulated transactions
DEFAULT_FROM = to_checksum_address("0xd73a92be73efbfcf3854433a5fcbabf9c1316073")
BLOCK_GAS_LIMIT = 30_000_000
# Start/end block offsets used when faking a proposal's voting window
VOTING_WINDOW_START_OFFSET = 100

ZERO_BYTES32 = "0x" + "00" * 32

TENDERLY_DASHBOARD_URL = "https://dashboard.tenderly.co/shared/simulation"

# --- Known governors ---
COMPOUND_GOVERNOR_BRAVO = to_checksum_address("0xc0da02939e1441f497fd74f78ce7decb17b66529")
UNISWAP_GOVERNOR_BRAVO = to_checksum_address("0x408ed6354d4973f66138c91495f2f2fcbd8724c3")
UNISWAP_V3_FACTORY = to_checksum_address("0x1f98431c8ad98523631ae4a59f267346ea31f984")
