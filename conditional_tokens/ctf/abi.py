"""
ABIs for the ConditionalTokens contract and its ERC20 collateral.

Sources:
- https://github.com/gnosis/conditional-tokens-contracts (LGPL-3.0)
- https://github.com/Polymarket/ctf-exchange (MIT)
"""

_SPLIT_MERGE_INPUTS = [
    {"name": "collateralToken", "type": "address"},
    {"name": "parentCollectionId", "type": "bytes32"},
    {"name": "conditionId", "type": "bytes32"},
    {"name": "partition", "type": "uint256[]"},
    {"name": "amount", "type": "uint256"}
]

CONDITIONAL_TOKENS_ABI = [
    # splitPosition - Collateral (or parent position) → outcome positions
    {
        "type": "function",
        "name": "splitPosition",
        "inputs": _SPLIT_MERGE_INPUTS,
        "outputs": [],
        "stateMutability": "nonpayable"
    },
    # mergePositions - Outcome positions → collateral (or parent position)
    {
        "type": "function",
        "name": "mergePositions",
        "inputs": _SPLIT_MERGE_INPUTS,
        "outputs": [],
        "stateMutability": "nonpayable"
    },
    # redeemPositions - Burn positions of a resolved condition for payout
    {
        "type": "function",
        "name": "redeemPositions",
        "inputs": [
            {"name": "collateralToken", "type": "address"},
            {"name": "parentCollectionId", "type": "bytes32"},
            {"name": "conditionId", "type": "bytes32"},
            {"name": "indexSets", "type": "uint256[]"}
        ],
        "outputs": [],
        "stateMutability": "nonpayable"
    },
    # Identifier helpers (pure)
    {
        "type": "function",
        "name": "getConditionId",
        "inputs": [
            {"name": "oracle", "type": "address"},
            {"name": "questionId", "type": "bytes32"},
            {"name": "outcomeSlotCount", "type": "uint256"}
        ],
        "outputs": [{"name": "", "type": "bytes32"}],
        "stateMutability": "pure"
    },
    {
        "type": "function",
        "name": "getCollectionId",
        "inputs": [
            {"name": "parentCollectionId", "type": "bytes32"},
            {"name": "conditionId", "type": "bytes32"},
            {"name": "indexSet", "type": "uint256"}
        ],
        "outputs": [{"name": "", "type": "bytes32"}],
        "stateMutability": "view"
    },
    {
        "type": "function",
        "name": "getPositionId",
        "inputs": [
            {"name": "collateralToken", "type": "address"},
            {"name": "collectionId", "type": "bytes32"}
        ],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "pure"
    },
    # Condition state
    {
        "type": "function",
        "name": "getOutcomeSlotCount",
        "inputs": [{"name": "conditionId", "type": "bytes32"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view"
    },
    {
        "type": "function",
        "name": "payoutDenominator",
        "inputs": [{"name": "", "type": "bytes32"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view"
    },
    # ERC1155 balances
    {
        "type": "function",
        "name": "balanceOfBatch",
        "inputs": [
            {"name": "owners", "type": "address[]"},
            {"name": "ids", "type": "uint256[]"}
        ],
        "outputs": [{"name": "", "type": "uint256[]"}],
        "stateMutability": "view"
    },
]

# ERC20 ABI (collateral)
ERC20_ABI = [
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view"
    },
    {
        "type": "function",
        "name": "allowance",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"}
        ],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view"
    },
]
