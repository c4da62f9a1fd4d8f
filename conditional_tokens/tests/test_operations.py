"""Tests for split, merge and redeem builders."""

import pytest

from ..ctf.identifiers import derive_collection_id, derive_position_id
from ..ctf.operations import PositionOperationBuilder, build_merge, build_redeem, build_split
from ..exceptions import (
    IncompleteCoverageError,
    InvalidCollectionIdError,
    OverlappingIndexSetsError,
    ValidationError,
    ZeroAmountError,
)
from ..models import OperationKind, ZERO_COLLECTION_ID
from ..utils.validators import ZERO_BYTES32

USDC = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
CONDITION = "0x48549c6a116d4d1ee6b742e2e64dac1c8f9c9704210afb173cd279c34c2fe6e5"
OTHER_CONDITION = "0xfea34c1014edf323b2d036cac5ece4d2cf6d9e3e64ecb7a1185c818830967ef8"

POS_YES = 67497207073118445457169210428395039123014221525794443884543075032420535941984
POS_NO = 27548721605508583772097439612493291864163853719912054856657745763021644102115


class TestBuildSplit:
    """Split builder."""

    def test_binary_split(self):
        op = build_split(USDC, CONDITION, [0b01, 0b10], 100)

        assert op.kind == OperationKind.SPLIT
        assert op.method_name == "splitPosition"
        assert op.amount == 100
        assert op.index_sets == (1, 2)
        assert op.parent_collection_id == ZERO_COLLECTION_ID
        assert op.position_ids == (POS_YES, POS_NO)

    def test_position_ids_independently_derivable(self):
        op = build_split(USDC, CONDITION, [0b01, 0b10], 100)

        for index_set, position_id in zip(op.index_sets, op.position_ids):
            collection = derive_collection_id(ZERO_BYTES32, CONDITION, index_set)
            assert derive_position_id(USDC, collection) == position_id

    def test_call_arguments(self):
        op = build_split(USDC, CONDITION, [0b01, 0b10], 100)
        collateral, parent, condition, partition, amount = op.call_arguments()

        assert collateral == USDC
        assert parent == ZERO_BYTES32
        assert condition == bytes.fromhex(CONDITION[2:])
        assert partition == [1, 2]
        assert amount == 100

    def test_zero_amount_rejected(self):
        with pytest.raises(ZeroAmountError):
            build_split(USDC, CONDITION, [1, 2], 0)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            build_split(USDC, CONDITION, [1, 2], -1)

    def test_overlapping_partition_rejected(self):
        with pytest.raises(OverlappingIndexSetsError):
            build_split(USDC, CONDITION, [0b011, 0b010], 100, outcome_slot_count=3)

    def test_nested_split(self):
        parent = derive_collection_id(ZERO_BYTES32, OTHER_CONDITION, 1)
        op = build_split(USDC, CONDITION, [1, 2], 50, parent_collection_id=parent)

        assert op.parent_collection_id == "0x" + parent.hex()
        assert op.position_ids[0] not in (POS_YES, POS_NO)

    def test_invalid_parent_rejected(self):
        with pytest.raises(InvalidCollectionIdError):
            build_split(USDC, CONDITION, [1, 2], 50, parent_collection_id="0x3f" + "ff" * 31)

    def test_bad_collateral_rejected(self):
        with pytest.raises(ValidationError):
            build_split("0x1234", CONDITION, [1, 2], 100)


class TestBuildMerge:
    """Merge builder."""

    def test_binary_merge(self):
        op = build_merge(USDC, CONDITION, [1, 2], 100)

        assert op.kind == OperationKind.MERGE
        assert op.method_name == "mergePositions"
        assert op.position_ids == (POS_YES, POS_NO)
        assert len(op.call_arguments()) == 5

    def test_zero_amount_rejected(self):
        with pytest.raises(ZeroAmountError):
            build_merge(USDC, CONDITION, [1, 2], 0)


class TestBuildRedeem:
    """Redeem builder."""

    def test_redeem_single_outcome(self):
        op = build_redeem(USDC, CONDITION, [0b01])

        assert op.kind == OperationKind.REDEEM
        assert op.method_name == "redeemPositions"
        assert op.amount is None
        assert op.position_ids == (POS_YES,)

    def test_call_arguments_have_no_amount(self):
        op = build_redeem(USDC, CONDITION, [1, 2])
        assert op.call_arguments() == (USDC, ZERO_BYTES32, bytes.fromhex(CONDITION[2:]), [1, 2])

    def test_full_coverage_optional(self):
        with pytest.raises(IncompleteCoverageError):
            build_redeem(USDC, CONDITION, [1], require_full_coverage=True)


class TestPositionOperationBuilder:
    """Builder bound to a collateral token."""

    def test_split_merge_redeem(self):
        builder = PositionOperationBuilder(USDC.lower())

        assert builder.collateral_token == USDC
        assert builder.split(CONDITION, [1, 2], 100).position_ids == (POS_YES, POS_NO)
        assert builder.merge(CONDITION, [1, 2], 100).kind == OperationKind.MERGE
        assert builder.redeem(CONDITION, [2]).position_ids == (POS_NO,)

    def test_context(self):
        op = PositionOperationBuilder(USDC).split(CONDITION, [1, 2], 100)
        context = op.context()

        assert context["operation"] == "split"
        assert context["condition_id"] == CONDITION
        assert context["position_ids"] == [str(POS_YES), str(POS_NO)]
        assert len(context["collection_ids"]) == 2
