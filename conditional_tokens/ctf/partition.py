"""
Partition validation for split, merge and redeem.

A partition is an ordered list of index sets over one condition's outcome
slots. The ConditionalTokens contract only rejects a malformed partition
after gas is spent, so every partition is checked here first.
"""

from typing import Iterable, Tuple

from ..exceptions import (
    DuplicateIndexSetError,
    EmptyPartitionError,
    IncompleteCoverageError,
    IndexSetOutOfRangeError,
    OverlappingIndexSetsError,
    PartitionError,
)
from .identifiers import full_index_set, validate_outcome_slot_count


def validate_partition(
    partition: Iterable[int],
    outcome_slot_count: int,
    require_full_coverage: bool = False,
) -> Tuple[int, ...]:
    """
    Validate an index-set partition.

    Checks run in order and stop at the first failure:
    1. partition is non-empty
    2. every index set is in [1, 2**outcome_slot_count)
    3. distinct index sets are pairwise disjoint
    4. no index set is listed twice
    5. (optional) the union covers every outcome slot

    Args:
        partition: Index sets (bitmasks)
        outcome_slot_count: Slot count of the condition
        require_full_coverage: Require the union to equal the full index set

    Returns:
        The partition as a tuple, in caller order

    Raises:
        InvalidSlotCountError: If outcome_slot_count is out of range
        EmptyPartitionError: If partition is empty
        IndexSetOutOfRangeError: If an entry is 0 or too wide
        OverlappingIndexSetsError: If two entries share an outcome slot
        DuplicateIndexSetError: If an entry repeats
        IncompleteCoverageError: If coverage is required and slots are missing

    Example:
        >>> validate_partition([0b01, 0b10], 2)
        (1, 2)
    """
    validate_outcome_slot_count(outcome_slot_count)
    index_sets = list(partition)
    full = full_index_set(outcome_slot_count)

    if not index_sets:
        raise EmptyPartitionError("Partition must contain at least one index set", index_sets)

    for index_set in index_sets:
        if isinstance(index_set, bool) or not isinstance(index_set, int):
            raise IndexSetOutOfRangeError(
                f"Index set must be an integer, got {type(index_set)}",
                index_sets,
                index_set=index_set,
            )
        if index_set <= 0 or index_set > full:
            raise IndexSetOutOfRangeError(
                f"Index set {index_set} out of range: must be in [1, {full}] "
                f"for {outcome_slot_count} outcome slots",
                index_sets,
                index_set=index_set,
            )

    # Disjointness is checked over distinct values; exact repeats are reported below
    union = 0
    seen = []
    for index_set in dict.fromkeys(index_sets):
        if index_set & union:
            other = next(s for s in seen if s & index_set)
            raise OverlappingIndexSetsError(
                f"Index sets {other} and {index_set} share outcome slots "
                f"(overlap {other & index_set:#b})",
                index_sets,
                first=other,
                second=index_set,
            )
        union |= index_set
        seen.append(index_set)

    if len(seen) != len(index_sets):
        duplicate = next(s for s in seen if index_sets.count(s) > 1)
        raise DuplicateIndexSetError(
            f"Index set {duplicate} appears more than once",
            index_sets,
            index_set=duplicate,
        )

    if require_full_coverage and union != full:
        missing = full & ~union
        raise IncompleteCoverageError(
            f"Partition does not cover all {outcome_slot_count} outcome slots "
            f"(missing {missing:#b})",
            index_sets,
            missing=missing,
        )

    return tuple(index_sets)


def is_full_partition(partition: Iterable[int], outcome_slot_count: int) -> bool:
    """True if the (valid) partition covers every outcome slot."""
    union = 0
    for index_set in partition:
        union |= index_set
    return union == full_index_set(outcome_slot_count)


class PartitionValidator:
    """
    Reusable partition check bound to one condition's slot count.

    Example:
        >>> validator = PartitionValidator(outcome_slot_count=3)
        >>> validator.validate([0b001, 0b110])
        (1, 6)
    """

    def __init__(self, outcome_slot_count: int, require_full_coverage: bool = False):
        self.outcome_slot_count = validate_outcome_slot_count(outcome_slot_count)
        self.require_full_coverage = require_full_coverage

    def validate(self, partition: Iterable[int]) -> Tuple[int, ...]:
        """Validate partition; see validate_partition."""
        return validate_partition(
            partition,
            self.outcome_slot_count,
            require_full_coverage=self.require_full_coverage,
        )

    def is_valid(self, partition: Iterable[int]) -> bool:
        """Boolean form of validate()."""
        try:
            self.validate(partition)
        except PartitionError:
            return False
        return True
