"""
Conditional Token Framework (CTF) primitives.

Provides:
- Identifier derivation: condition, collection and position IDs
- Partition validation for split, merge and redeem
- Operation builders producing PositionOperation descriptors
- Polygon mainnet addresses and contract ABIs

Submission (submitter.py) and the client facade (client.py) are imported
from their modules directly.

Contract repository: https://github.com/gnosis/conditional-tokens-contracts
License: LGPL-3.0
"""

from .addresses import (
    CHAIN_ID,
    CTF_ADDRESS,
    USDC_ADDRESS,
    UMA_CTF_ADAPTER,
)
from .abi import CONDITIONAL_TOKENS_ABI, ERC20_ABI
from .identifiers import (
    MAX_OUTCOME_SLOTS,
    MIN_OUTCOME_SLOTS,
    IdentifierCodec,
    binary_partition,
    calculate_index_set,
    derive_collection_id,
    derive_condition_id,
    derive_position_id,
    full_index_set,
    parse_index_set,
    validate_index_set,
    validate_outcome_slot_count,
)
from .partition import PartitionValidator, is_full_partition, validate_partition
from .operations import (
    PositionOperationBuilder,
    build_merge,
    build_redeem,
    build_split,
)

__all__ = [
    # Contract addresses
    "CHAIN_ID",
    "CTF_ADDRESS",
    "USDC_ADDRESS",
    "UMA_CTF_ADAPTER",
    # ABIs
    "CONDITIONAL_TOKENS_ABI",
    "ERC20_ABI",
    # Identifiers
    "MAX_OUTCOME_SLOTS",
    "MIN_OUTCOME_SLOTS",
    "IdentifierCodec",
    "binary_partition",
    "calculate_index_set",
    "derive_collection_id",
    "derive_condition_id",
    "derive_position_id",
    "full_index_set",
    "parse_index_set",
    "validate_index_set",
    "validate_outcome_slot_count",
    # Partitions
    "PartitionValidator",
    "is_full_partition",
    "validate_partition",
    # Operations
    "PositionOperationBuilder",
    "build_merge",
    "build_redeem",
    "build_split",
]
