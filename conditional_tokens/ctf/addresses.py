"""
Contract addresses for Polymarket's Conditional Tokens deployment.

Source: https://github.com/Polymarket/neg-risk-ctf-adapter/blob/main/addresses.json
Network: Polygon Mainnet (Chain ID: 137)
License: MIT
"""

from typing import Dict

# Polygon Mainnet (Chain ID: 137)
CHAIN_ID = 137

# Core CTF Contracts
CTF_ADDRESS = "0x4D97DCd97eC945f40cF65F87097ACe5EA0476045"
USDC_ADDRESS = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"

# Oracle used by Polymarket binary markets
UMA_CTF_ADAPTER = "0x6A9D222616C90FcA5754cd1333cFD9b7fb6a4F74"

CORE_CONTRACTS: Dict[str, str] = {
    "ctf": CTF_ADDRESS,
    "usdc": USDC_ADDRESS,
    "uma_ctf_adapter": UMA_CTF_ADAPTER,
}


def get_contract_address(contract_name: str) -> str:
    """
    Get contract address by name.

    Args:
        contract_name: Contract name (e.g., "ctf", "usdc")

    Returns:
        Contract address

    Raises:
        KeyError: If contract name not found
    """
    return CORE_CONTRACTS[contract_name]
