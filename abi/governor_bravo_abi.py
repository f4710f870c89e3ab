# --- GOVERNOR BRAVO (Compound / Uniswap) ---
_PROPOSAL_CREATED_INPUTS = [
    {"indexed": False, "internalType": "uint256", "name": "id", "type": "uint256"},
    {"indexed": False, "internalType": "address", "name": "proposer", "type": "address"},
    {"indexed": False, "internalType": "address[]", "name": "targets", "type": "address[]"},
    {"indexed": False, "internalType": "uint256[]", "name": "values", "type": "uint256[]"},
    {"indexed": False, "internalType": "string[]", "name": "signatures", "type": "string[]"},
    {"indexed": False, "internalType": "bytes[]", "name": "calldatas", "type": "bytes[]"},
    {"indexed": False, "internalType": "uint256", "name": "startBlock", "type": "uint256"},
    {"indexed": False, "internalType": "uint256", "name": "endBlock", "type": "uint256"},
    {"indexed": False, "internalType": "string", "name": "description", "type": "string"}
]

GOVERNOR_BRAVO_ABI = [
    {
        "anonymous": False,
        "inputs": _PROPOSAL_CREATED_INPUTS,
        "name": "ProposalCreated",
        "type": "event"
    },
    {
        "anonymous": False,
        "inputs": [{"indexed": False, "internalType": "uint256", "name": "id", "type": "uint256"}],
        "name": "ProposalExecuted",
        "type": "event"
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": False, "internalType": "uint256", "name": "id", "type": "uint256"},
            {"indexed": False, "internalType": "uint256", "name": "eta", "type": "uint256"}
        ],
        "name": "ProposalQueued",
        "type": "event"
    },
    {
        "inputs": [],
        "name": "proposalCount",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "name": "proposals",
        "outputs": [
            {"internalType": "uint256", "name": "id", "type": "uint256"},
            {"internalType": "address", "name": "proposer", "type": "address"},
            {"internalType": "uint256", "name": "eta", "type": "uint256"},
            {"internalType": "uint256", "name": "startBlock", "type": "uint256"},
            {"internalType": "uint256", "name": "endBlock", "type": "uint256"},
            {"internalType": "uint256", "name": "forVotes", "type": "uint256"},
            {"internalType": "uint256", "name": "againstVotes", "type": "uint256"},
            {"internalType": "uint256", "name": "abstainVotes", "type": "uint256"},
            {"internalType": "bool", "name": "canceled", "type": "bool"},
            {"internalType": "bool", "name": "executed", "type": "bool"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "name": "getActions",
        "outputs": [
            {"internalType": "address[]", "name": "targets", "type": "address[]"},
            {"internalType": "uint256[]", "name": "values", "type": "uint256[]"},
            {"internalType": "string[]", "name": "signatures", "type": "string[]"},
            {"internalType": "bytes[]", "name": "calldatas", "type": "bytes[]"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "name": "state",
        "outputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "name": "execute",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "timelock",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "comp",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "uni",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    }
]

# Compound Timelock, the executor behind every Bravo governor
BRAVO_TIMELOCK_ABI = [
    {
        "inputs": [{"internalType": "bytes32", "name": "", "type": "bytes32"}],
        "name": "queuedTransactions",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "delay",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "admin",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    }
]
