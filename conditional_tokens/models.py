"""
Type definitions for the Conditional Tokens client.

Uses Pydantic for runtime validation and type safety.
Hashes are carried as 0x-prefixed lowercase hex strings, addresses as
checksummed strings, and uint256 values as Python ints.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from .exceptions import ZeroAmountError
from .utils.validators import (
    ZERO_BYTES32,
    to_hex32,
    validate_address,
    validate_bytes32,
    validate_uint256,
)

ZERO_COLLECTION_ID = to_hex32(ZERO_BYTES32)


def _hex32(value: Any, name: str) -> str:
    return to_hex32(validate_bytes32(value, name))


def _check_slot_count(outcome_slot_count: int) -> None:
    from .ctf.identifiers import validate_outcome_slot_count
    validate_outcome_slot_count(outcome_slot_count)


def _check_partition(index_sets: list[int], outcome_slot_count: int,
                     require_full_coverage: bool = False) -> None:
    from .ctf.partition import validate_partition
    validate_partition(index_sets, outcome_slot_count, require_full_coverage)


def _check_amount(amount: int) -> None:
    if amount == 0:
        raise ZeroAmountError("amount must be positive, got 0", amount=amount)


class OperationKind(str, Enum):
    """Position operation type."""
    SPLIT = "split"
    MERGE = "merge"
    REDEEM = "redeem"


# ConditionalTokens function per operation kind
CONTRACT_METHODS = {
    OperationKind.SPLIT: "splitPosition",
    OperationKind.MERGE: "mergePositions",
    OperationKind.REDEEM: "redeemPositions",
}


class _Request(BaseModel):
    """
    Common request config.

    Requests are immutable and fully validated on construction: field
    formats first, then the domain rules the builders enforce (slot count,
    index sets, partition, amount). An invalid request never exists.
    """
    model_config = ConfigDict(frozen=True)

    @field_validator("collateral_token", "oracle", mode="before", check_fields=False)
    @classmethod
    def validate_addresses(cls, v: Any) -> str:
        """Checksum address fields."""
        return validate_address(v)

    @field_validator(
        "question_id", "condition_id", "parent_collection_id", "collection_id",
        mode="before", check_fields=False,
    )
    @classmethod
    def validate_hashes(cls, v: Any, info: ValidationInfo) -> str:
        """Normalise bytes32 fields to lowercase hex."""
        return _hex32(v, info.field_name)

    @field_validator("amount", "index_set", mode="before", check_fields=False)
    @classmethod
    def validate_uints(cls, v: Any, info: ValidationInfo) -> int:
        """Range-check uint256 fields."""
        return validate_uint256(v, info.field_name)

    @field_validator("partition", "index_sets", mode="before", check_fields=False)
    @classmethod
    def validate_uint_lists(cls, v: Any, info: ValidationInfo) -> list[int]:
        """Range-check each uint256 in a list field."""
        return [validate_uint256(item, info.field_name) for item in v]


# Request Models
class ConditionIdRequest(_Request):
    """Request to calculate a condition ID."""
    oracle: str = Field(..., description="Oracle address that will report the outcome")
    question_id: str = Field(..., description="Hash of the question being resolved")
    outcome_slot_count: int = Field(..., description="Number of outcome slots (2 for binary markets)")

    @model_validator(mode="after")
    def check_slot_count(self) -> "ConditionIdRequest":
        _check_slot_count(self.outcome_slot_count)
        return self


class CollectionIdRequest(_Request):
    """Request to calculate a collection ID."""
    parent_collection_id: str = Field(
        default=ZERO_COLLECTION_ID,
        description="Parent collection ID (zero for top-level positions)"
    )
    condition_id: str = Field(..., description="Condition ID")
    index_set: int = Field(..., description="Outcome slot bitmask (0b01 = 1, 0b10 = 2)")
    outcome_slot_count: Optional[int] = Field(
        None, description="Slot count of the condition, enables the index set upper bound check"
    )

    @model_validator(mode="after")
    def check_index_set(self) -> "CollectionIdRequest":
        from .ctf.identifiers import validate_index_set
        validate_index_set(self.index_set, self.outcome_slot_count)
        return self


class PositionIdRequest(_Request):
    """Request to calculate a position (ERC1155 token) ID."""
    collateral_token: str = Field(..., description="Collateral token address (e.g., USDC)")
    collection_id: str = Field(..., description="Collection ID")


class SplitPositionRequest(_Request):
    """Request to split collateral (or a parent position) into outcome positions."""
    collateral_token: str = Field(..., description="Collateral token address (e.g., USDC)")
    parent_collection_id: str = Field(
        default=ZERO_COLLECTION_ID,
        description="Parent collection ID (zero for Polymarket)"
    )
    condition_id: str = Field(..., description="Condition ID to split on")
    partition: list[int] = Field(..., description="Disjoint index sets, [1, 2] for binary markets")
    amount: int = Field(..., description="Amount of collateral to split (base units)")
    outcome_slot_count: int = Field(default=2, description="Slot count of the condition")

    @model_validator(mode="after")
    def check_split(self) -> "SplitPositionRequest":
        _check_amount(self.amount)
        _check_partition(self.partition, self.outcome_slot_count)
        return self


class MergePositionsRequest(_Request):
    """Request to merge outcome positions back into collateral."""
    collateral_token: str = Field(..., description="Collateral token address (e.g., USDC)")
    parent_collection_id: str = Field(
        default=ZERO_COLLECTION_ID,
        description="Parent collection ID (zero for Polymarket)"
    )
    condition_id: str = Field(..., description="Condition ID to merge on")
    partition: list[int] = Field(..., description="Disjoint index sets, [1, 2] for binary markets")
    amount: int = Field(..., description="Amount of full sets to merge (base units)")
    outcome_slot_count: int = Field(default=2, description="Slot count of the condition")

    @model_validator(mode="after")
    def check_merge(self) -> "MergePositionsRequest":
        _check_amount(self.amount)
        _check_partition(self.partition, self.outcome_slot_count)
        return self


class RedeemPositionsRequest(_Request):
    """Request to redeem positions of a resolved condition for collateral."""
    collateral_token: str = Field(..., description="Collateral token address (e.g., USDC)")
    parent_collection_id: str = Field(
        default=ZERO_COLLECTION_ID,
        description="Parent collection ID (zero for Polymarket)"
    )
    condition_id: str = Field(..., description="Condition ID to redeem")
    index_sets: list[int] = Field(..., description="Disjoint index sets to redeem")
    outcome_slot_count: int = Field(default=2, description="Slot count of the condition")
    require_full_coverage: bool = Field(
        default=False, description="Require index_sets to cover every outcome slot"
    )

    @model_validator(mode="after")
    def check_index_sets(self) -> "RedeemPositionsRequest":
        _check_partition(self.index_sets, self.outcome_slot_count, self.require_full_coverage)
        return self


# Response Models
class ConditionIdResponse(BaseModel):
    """Calculated condition ID."""
    model_config = ConfigDict(frozen=True)

    condition_id: str


class CollectionIdResponse(BaseModel):
    """Calculated collection ID."""
    model_config = ConfigDict(frozen=True)

    collection_id: str


class PositionIdResponse(BaseModel):
    """Calculated position ID (ERC1155 token ID)."""
    model_config = ConfigDict(frozen=True)

    position_id: int


class _TransactionResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_hash: str = Field(..., description="Transaction hash")
    block_number: int = Field(..., ge=0, description="Block the transaction was mined in")
    position_ids: list[int] = Field(default_factory=list, description="Positions touched")


class SplitPositionResponse(_TransactionResponse):
    """Result of a split transaction."""
    pass


class MergePositionsResponse(_TransactionResponse):
    """Result of a merge transaction."""
    pass


class RedeemPositionsResponse(_TransactionResponse):
    """Result of a redeem transaction."""
    pass


# Operation descriptor and receipt
class PositionOperation(BaseModel):
    """
    Fully validated split/merge/redeem call, ready for submission.

    Immutable and self-contained: carries every derived identifier so the
    submitter and error reports never need to re-derive them.
    """
    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    collateral_token: str
    parent_collection_id: str = ZERO_COLLECTION_ID
    condition_id: str
    outcome_slot_count: int
    index_sets: tuple[int, ...] = Field(..., description="Partition (split/merge) or index sets (redeem)")
    amount: Optional[int] = Field(None, description="Amount for split/merge, None for redeem")
    collection_ids: tuple[str, ...] = Field(..., description="One collection ID per index set")
    position_ids: tuple[int, ...] = Field(..., description="One position ID per index set")

    @property
    def method_name(self) -> str:
        """ConditionalTokens function this operation calls."""
        return CONTRACT_METHODS[self.kind]

    def call_arguments(self) -> tuple:
        """
        Positional arguments for the contract function.

        splitPosition / mergePositions:
            (collateralToken, parentCollectionId, conditionId, partition, amount)
        redeemPositions:
            (collateralToken, parentCollectionId, conditionId, indexSets)
        """
        args = (
            self.collateral_token,
            validate_bytes32(self.parent_collection_id),
            validate_bytes32(self.condition_id),
            list(self.index_sets),
        )
        if self.kind == OperationKind.REDEEM:
            return args
        return args + (self.amount,)

    def context(self) -> dict[str, Any]:
        """Identifiers attached to logs and submission errors."""
        return {
            "operation": self.kind.value,
            "condition_id": self.condition_id,
            "parent_collection_id": self.parent_collection_id,
            "collection_ids": list(self.collection_ids),
            "position_ids": [str(pid) for pid in self.position_ids],
            "amount": self.amount,
        }


class OperationReceipt(BaseModel):
    """Confirmation of a mined operation."""
    model_config = ConfigDict(frozen=True)

    transaction_hash: str = Field(..., description="0x-prefixed transaction hash")
    block_number: int = Field(..., ge=0, description="Block number")
    gas_used: Optional[int] = Field(None, ge=0, description="Gas consumed")
