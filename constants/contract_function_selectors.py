# Function signatures used to build and decode proposal calldata
BRAVO_EXECUTE_SIGNATURE = "execute(uint256)"
OZ_EXECUTE_SIGNATURE = "execute(address[],uint256[],bytes[],bytes32)"
TIMELOCK_SCHEDULE_SIGNATURE = "schedule(address,uint256,bytes,bytes32,bytes32,uint256)"
TIMELOCK_SCHEDULE_BATCH_SIGNATURE = "scheduleBatch(address[],uint256[],bytes[],bytes32,bytes32,uint256)"
TIMELOCK_EXECUTE_BATCH_SIGNATURE = "executeBatch(address[],uint256[],bytes[],bytes32,bytes32)"
ARB_SYS_SEND_TX_TO_L1_SIGNATURE = "sendTxToL1(address,bytes)"

# Payload of a RETRYABLE_TICKET_MAGIC action in the L1 timelock:
# (inbox, l2Target, l2Value, gasLimit, maxFeePerGas, l2Calldata)
RETRYABLE_TICKET_PAYLOAD_TYPES = ["address", "address", "uint256", "uint256", "uint256", "bytes"]

# Arbitrum governance
ARBITRUM_FUNCTION_SELECTORS = {
    "0x928c169a": "sendTxToL1(address,bytes)",
    "0x8f2a0bb0": "scheduleBatch(address[],uint256[],bytes[],bytes32,bytes32,uint256)",
    "0x1cff79cd": "execute(address,bytes)",
    "0xb147f40c": "perform()",
}

# Governor / Timelock Function Selectors
GOVERNANCE_FUNCTION_SELECTORS = {
    "0xfe0d94c1": "execute(uint256)",
    "0xda95691a": "propose(address[],uint256[],string[],bytes[],string)",
    "0x56781388": "castVote(uint256,uint8)",
    "0x3e4f49e6": "state(uint256)",
    "0x24bc1a64": "quorumVotes()",
    "0x2f2ff15d": "grantRole(bytes32,address)",
    "0xd547741f": "revokeRole(bytes32,address)",
}

# ERC-20 Standard Function Selectors
ERC20_FUNCTION_SELECTORS = {
    "0xa9059cbb": "transfer(address,uint256)",
    "0x095ea7b3": "approve(address,uint256)",
    "0x23b872dd": "transferFrom(address,address,uint256)",
}

# Proxy administration
PROXY_FUNCTION_SELECTORS = {
    "0x3659cfe6": "upgradeTo(address)",
    "0x4f1ef286": "upgradeToAndCall(address,bytes)",
    "0x99a88ec4": "upgrade(address,address)",
    "0x9623609d": "upgradeAndCall(address,address,bytes)",
}

ALL_FUNCTION_SELECTORS = {
    **ARBITRUM_FUNCTION_SELECTORS,
    **GOVERNANCE_FUNCTION_SELECTORS,
    **ERC20_FUNCTION_SELECTORS,
    **PROXY_FUNCTION_SELECTORS,
}


def get_function_signature(selector: str) -> str:
    """
    Get function signature from selector

    Args:
        selector: Function selector (e.g., "0xa9059cbb")

    Returns:
        Function signature or "Unknown" if not found
    """
    return ALL_FUNCTION_SELECTORS.get(selector.lower(), "Unknown")
