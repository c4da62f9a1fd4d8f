"""Tests for request/response models."""

import pydantic
import pytest

from ..exceptions import (
    DuplicateIndexSetError,
    EmptyPartitionError,
    IncompleteCoverageError,
    IndexSetOutOfRangeError,
    InvalidIndexSetError,
    InvalidSlotCountError,
    ValidationError,
    ZeroAmountError,
)
from ..models import (
    CollectionIdRequest,
    ConditionIdRequest,
    MergePositionsRequest,
    OperationReceipt,
    RedeemPositionsRequest,
    SplitPositionRequest,
    SplitPositionResponse,
    ZERO_COLLECTION_ID,
)

USDC = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
CONDITION = "0x48549c6a116d4d1ee6b742e2e64dac1c8f9c9704210afb173cd279c34c2fe6e5"


def test_addresses_checksummed():
    request = SplitPositionRequest(
        collateral_token=USDC.lower(), condition_id=CONDITION, partition=[1, 2], amount=1
    )
    assert request.collateral_token == USDC


def test_hashes_normalised():
    request = CollectionIdRequest(condition_id=CONDITION.upper().replace("0X", "0x"), index_set=1)
    assert request.condition_id == CONDITION
    assert request.parent_collection_id == ZERO_COLLECTION_ID

    request = CollectionIdRequest(condition_id=bytes.fromhex(CONDITION[2:]), index_set=1)
    assert request.condition_id == CONDITION


def test_uint_strings_accepted():
    request = SplitPositionRequest(
        collateral_token=USDC, condition_id=CONDITION, partition=["1", "0x2"], amount="1000000"
    )
    assert request.partition == [1, 2]
    assert request.amount == 1_000_000


def test_defaults():
    request = RedeemPositionsRequest(collateral_token=USDC, condition_id=CONDITION, index_sets=[1])
    assert request.outcome_slot_count == 2
    assert request.require_full_coverage is False


def test_malformed_fields_raise_validation_error():
    with pytest.raises(ValidationError):
        ConditionIdRequest(oracle="0x1234", question_id=CONDITION, outcome_slot_count=2)

    with pytest.raises(ValidationError):
        ConditionIdRequest(oracle=USDC, question_id="0xabc", outcome_slot_count=2)

    with pytest.raises(ValidationError):
        SplitPositionRequest(
            collateral_token=USDC, condition_id=CONDITION, partition=[1, 2], amount=-5
        )

    with pytest.raises(ValidationError):
        SplitPositionRequest(
            collateral_token=USDC, condition_id=CONDITION, partition=[1, 2**256], amount=5
        )


def test_requests_are_frozen():
    request = ConditionIdRequest(oracle=USDC, question_id=CONDITION, outcome_slot_count=2)
    with pytest.raises(pydantic.ValidationError):
        request.outcome_slot_count = 3


def test_response_block_number_non_negative():
    with pytest.raises(pydantic.ValidationError):
        SplitPositionResponse(transaction_hash="0x01", block_number=-1)

    response = SplitPositionResponse(transaction_hash="0x01", block_number=7, position_ids=[1, 2])
    assert response.position_ids == [1, 2]


def test_receipt_gas_optional():
    receipt = OperationReceipt(transaction_hash="0x01", block_number=1)
    assert receipt.gas_used is None


class TestDomainRulesOnConstruction:
    """Requests reject invalid slot counts, index sets and amounts when built."""

    def test_condition_slot_count(self):
        with pytest.raises(InvalidSlotCountError):
            ConditionIdRequest(oracle=USDC, question_id=CONDITION, outcome_slot_count=1)

        with pytest.raises(InvalidSlotCountError):
            ConditionIdRequest(oracle=USDC, question_id=CONDITION, outcome_slot_count=257)

    def test_collection_index_set(self):
        with pytest.raises(InvalidIndexSetError):
            CollectionIdRequest(condition_id=CONDITION, index_set=0)

        with pytest.raises(InvalidIndexSetError):
            CollectionIdRequest(condition_id=CONDITION, index_set=0b100, outcome_slot_count=2)

        # No slot count: only the uint256 range applies
        assert CollectionIdRequest(condition_id=CONDITION, index_set=0b100).index_set == 4

    def test_split_amount_and_partition(self):
        with pytest.raises(ZeroAmountError):
            SplitPositionRequest(
                collateral_token=USDC, condition_id=CONDITION, partition=[1, 2], amount=0
            )

        with pytest.raises(EmptyPartitionError):
            SplitPositionRequest(
                collateral_token=USDC, condition_id=CONDITION, partition=[], amount=10
            )

        with pytest.raises(IndexSetOutOfRangeError):
            SplitPositionRequest(
                collateral_token=USDC, condition_id=CONDITION, partition=[1, 4], amount=10
            )

    def test_merge_duplicate(self):
        with pytest.raises(DuplicateIndexSetError):
            MergePositionsRequest(
                collateral_token=USDC, condition_id=CONDITION, partition=[2, 2], amount=10
            )

    def test_redeem_slot_count_and_coverage(self):
        with pytest.raises(InvalidSlotCountError):
            RedeemPositionsRequest(
                collateral_token=USDC, condition_id=CONDITION, index_sets=[1], outcome_slot_count=999
            )

        with pytest.raises(IncompleteCoverageError):
            RedeemPositionsRequest(
                collateral_token=USDC, condition_id=CONDITION, index_sets=[1],
                require_full_coverage=True
            )

    def test_domain_errors_are_not_wrapped(self):
        with pytest.raises(ValidationError) as exc_info:
            SplitPositionRequest(
                collateral_token=USDC, condition_id=CONDITION, partition=[], amount=0
            )

        assert not isinstance(exc_info.value, pydantic.ValidationError)
