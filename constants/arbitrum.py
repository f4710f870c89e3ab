from eth_utils import to_checksum_address

from constants.constants import ARB_NOVA_CHAIN_ID, ARB_ONE_CHAIN_ID

# Precompile used by L2 contracts to send messages to L1
ARB_SYS = to_checksum_address("0x0000000000000000000000000000000000000064")

# Target that makes the L1 timelock create a retryable ticket instead of making a call
RETRYABLE_TICKET_MAGIC = to_checksum_address("0xa723c008e76e379c55599d2e4d93879beafda79c")

# L1 -> L2 address aliasing offset applied to contract senders of retryables
L1_TO_L2_ALIAS_OFFSET = 0x1111000000000000000000000000000000001111

# --- Governance contracts ---
L1_TIMELOCK = to_checksum_address("0xe6841d92b0c345144506576ec13ecf5103ac7f49")
L2_CORE_GOVERNOR = to_checksum_address("0xf07ded9dc292157749b6fd268e37df6ea38395b9")

ARB_ONE_UPGRADE_EXECUTOR = to_checksum_address("0xcf57572261c7c2bcf21ffd220ea7d1a27d40a827")

# --- Delayed inboxes, used to tell which L2 a retryable goes to ---
ARB_ONE_INBOX = to_checksum_address("0x4dbd4fc535ac27206064b68ffcf827b0a60bab3f")
NOVA_INBOX = to_checksum_address("0xc4448b71118c9071bcb9734a0eac55d18a153949")

INBOX_CHAIN_IDS = {
    ARB_ONE_INBOX: ARB_ONE_CHAIN_ID,
    NOVA_INBOX: ARB_NOVA_CHAIN_ID,
}
