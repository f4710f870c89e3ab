# --- GOVERNOR (OpenZeppelin / Arbitrum) ---
GOVERNOR_OZ_ABI = [
    {
        "anonymous": False,
        "inputs": [
            {"indexed": False, "internalType": "uint256", "name": "proposalId", "type": "uint256"},
            {"indexed": False, "internalType": "address", "name": "proposer", "type": "address"},
            {"indexed": False, "internalType": "address[]", "name": "targets", "type": "address[]"},
            {"indexed": False, "internalType": "uint256[]", "name": "values", "type": "uint256[]"},
            {"indexed": False, "internalType": "string[]", "name": "signatures", "type": "string[]"},
            {"indexed": False, "internalType": "bytes[]", "name": "calldatas", "type": "bytes[]"},
            {"indexed": False, "internalType": "uint256", "name": "startBlock", "type": "uint256"},
            {"indexed": False, "internalType": "uint256", "name": "endBlock", "type": "uint256"},
            {"indexed": False, "internalType": "string", "name": "description", "type": "string"}
        ],
        "name": "ProposalCreated",
        "type": "event"
    },
    {
        "anonymous": False,
        "inputs": [{"indexed": False, "internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "name": "ProposalExecuted",
        "type": "event"
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
        "name": "proposalSnapshot",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "name": "proposalDeadline",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "name": "proposalEta",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "name": "proposalVotes",
        "outputs": [
            {"internalType": "uint256", "name": "againstVotes", "type": "uint256"},
            {"internalType": "uint256", "name": "forVotes", "type": "uint256"},
            {"internalType": "uint256", "name": "abstainVotes", "type": "uint256"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address[]", "name": "targets", "type": "address[]"},
            {"internalType": "uint256[]", "name": "values", "type": "uint256[]"},
            {"internalType": "bytes[]", "name": "calldatas", "type": "bytes[]"},
            {"internalType": "bytes32", "name": "descriptionHash", "type": "bytes32"}
        ],
        "name": "hashProposal",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "pure",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address[]", "name": "targets", "type": "address[]"},
            {"internalType": "uint256[]", "name": "values", "type": "uint256[]"},
            {"internalType": "bytes[]", "name": "calldatas", "type": "bytes[]"},
            {"internalType": "bytes32", "name": "descriptionHash", "type": "bytes32"}
        ],
        "name": "execute",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
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
        "name": "token",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    }
]

# --- TimelockController (OpenZeppelin, also the Arbitrum L1/L2 timelocks) ---
TIMELOCK_CONTROLLER_ABI = [
    {
        "inputs": [
            {"internalType": "address[]", "name": "targets", "type": "address[]"},
            {"internalType": "uint256[]", "name": "values", "type": "uint256[]"},
            {"internalType": "bytes[]", "name": "payloads", "type": "bytes[]"},
            {"internalType": "bytes32", "name": "predecessor", "type": "bytes32"},
            {"internalType": "bytes32", "name": "salt", "type": "bytes32"}
        ],
        "name": "hashOperationBatch",
        "outputs": [{"internalType": "bytes32", "name": "", "type": "bytes32"}],
        "stateMutability": "pure",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "bytes32", "name": "id", "type": "bytes32"}],
        "name": "isOperationReady",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "getMinDelay",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    }
]
