"""
Split, merge and redeem operation builders.

Each builder validates its inputs, derives the collection and position IDs
the operation touches, and returns an immutable PositionOperation. No
network I/O happens here; submission is the TransactionSubmitter's job.
"""

import logging
from typing import Iterable, Union

from ..exceptions import ZeroAmountError
from ..models import OperationKind, PositionOperation
from ..utils.validators import (
    ZERO_BYTES32,
    to_hex32,
    validate_address,
    validate_bytes32,
    validate_uint256,
)
from .identifiers import derive_collection_id, derive_position_id
from .partition import validate_partition

logger = logging.getLogger(__name__)

Bytes32 = Union[bytes, str]


def _validate_amount(amount: int) -> int:
    amount = validate_uint256(amount, "amount")
    if amount == 0:
        raise ZeroAmountError("amount must be positive, got 0", amount=amount)
    return amount


def _build(
    kind: OperationKind,
    collateral_token: str,
    parent_collection_id: Bytes32,
    condition_id: Bytes32,
    index_sets: Iterable[int],
    outcome_slot_count: int,
    amount: Union[int, None],
    require_full_coverage: bool = False,
) -> PositionOperation:
    collateral = validate_address(collateral_token)
    parent = validate_bytes32(parent_collection_id, "parent_collection_id")
    condition = validate_bytes32(condition_id, "condition_id")
    sets = validate_partition(index_sets, outcome_slot_count, require_full_coverage)

    collection_ids = [
        derive_collection_id(parent, condition, index_set, outcome_slot_count)
        for index_set in sets
    ]
    position_ids = [derive_position_id(collateral, cid) for cid in collection_ids]

    operation = PositionOperation(
        kind=kind,
        collateral_token=collateral,
        parent_collection_id=to_hex32(parent),
        condition_id=to_hex32(condition),
        outcome_slot_count=outcome_slot_count,
        index_sets=sets,
        amount=amount,
        collection_ids=tuple(to_hex32(cid) for cid in collection_ids),
        position_ids=tuple(position_ids),
    )

    logger.debug(
        f"Built {kind.value} for condition {operation.condition_id}: "
        f"index_sets={list(sets)}, amount={amount}"
    )
    return operation


def build_split(
    collateral_token: str,
    condition_id: Bytes32,
    partition: Iterable[int],
    amount: int,
    parent_collection_id: Bytes32 = ZERO_BYTES32,
    outcome_slot_count: int = 2,
) -> PositionOperation:
    """
    Build a split: lock `amount` of collateral (or of the parent position)
    and mint `amount` of each position in the partition.

    Args:
        collateral_token: Collateral token address (e.g., USDC)
        condition_id: Condition to split on
        partition: Disjoint index sets, need not cover every slot
        amount: Amount in base units (1 USDC = 1_000_000)
        parent_collection_id: Zero for raw collateral
        outcome_slot_count: Slot count of the condition

    Returns:
        PositionOperation listing one position ID per partition entry

    Raises:
        ZeroAmountError: If amount is 0
        PartitionError: If partition is invalid
    """
    amount = _validate_amount(amount)
    return _build(
        OperationKind.SPLIT, collateral_token, parent_collection_id, condition_id,
        partition, outcome_slot_count, amount,
    )


def build_merge(
    collateral_token: str,
    condition_id: Bytes32,
    partition: Iterable[int],
    amount: int,
    parent_collection_id: Bytes32 = ZERO_BYTES32,
    outcome_slot_count: int = 2,
) -> PositionOperation:
    """
    Build a merge: burn `amount` of each position in the partition and
    credit `amount` of collateral (or of the parent position).

    Same validation rules as build_split.
    """
    amount = _validate_amount(amount)
    return _build(
        OperationKind.MERGE, collateral_token, parent_collection_id, condition_id,
        partition, outcome_slot_count, amount,
    )


def build_redeem(
    collateral_token: str,
    condition_id: Bytes32,
    index_sets: Iterable[int],
    parent_collection_id: Bytes32 = ZERO_BYTES32,
    outcome_slot_count: int = 2,
    require_full_coverage: bool = False,
) -> PositionOperation:
    """
    Build a redeem of positions in a resolved condition.

    Resolution is oracle state and is not checked here; redeeming an
    unresolved condition reverts on-chain.

    Args:
        collateral_token: Collateral token address
        condition_id: Resolved condition
        index_sets: Index sets to redeem, may be a strict subset of slots
        parent_collection_id: Zero for top-level positions
        outcome_slot_count: Slot count of the condition
        require_full_coverage: Require index_sets to cover every slot
    """
    return _build(
        OperationKind.REDEEM, collateral_token, parent_collection_id, condition_id,
        index_sets, outcome_slot_count, None, require_full_coverage,
    )


class PositionOperationBuilder:
    """
    Operation builder bound to one collateral token.

    Example:
        >>> builder = PositionOperationBuilder(USDC_ADDRESS)
        >>> op = builder.split(condition_id, [0b01, 0b10], 100_000_000)
        >>> op.method_name
        'splitPosition'
    """

    def __init__(self, collateral_token: str):
        self.collateral_token = validate_address(collateral_token)

    def split(self, condition_id: Bytes32, partition: Iterable[int], amount: int,
              parent_collection_id: Bytes32 = ZERO_BYTES32,
              outcome_slot_count: int = 2) -> PositionOperation:
        return build_split(self.collateral_token, condition_id, partition, amount,
                           parent_collection_id, outcome_slot_count)

    def merge(self, condition_id: Bytes32, partition: Iterable[int], amount: int,
              parent_collection_id: Bytes32 = ZERO_BYTES32,
              outcome_slot_count: int = 2) -> PositionOperation:
        return build_merge(self.collateral_token, condition_id, partition, amount,
                           parent_collection_id, outcome_slot_count)

    def redeem(self, condition_id: Bytes32, index_sets: Iterable[int],
               parent_collection_id: Bytes32 = ZERO_BYTES32,
               outcome_slot_count: int = 2,
               require_full_coverage: bool = False) -> PositionOperation:
        return build_redeem(self.collateral_token, condition_id, index_sets,
                            parent_collection_id, outcome_slot_count, require_full_coverage)
