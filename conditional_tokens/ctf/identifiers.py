"""
Identifier derivation for the Conditional Tokens Framework.

Reproduces CTHelpers from gnosis/conditional-tokens-contracts, the library
compiled into the ConditionalTokens contract Polymarket uses on Polygon:

- conditionId  = keccak256(oracle ++ questionId ++ uint256(outcomeSlotCount))
- collectionId = compressed alt_bn128 point of hash(conditionId, indexSet),
                 added to the parent collection's point when nested
- positionId   = uint256(keccak256(collateralToken ++ collectionId))

All functions are pure and thread-safe.
"""

from typing import List, Optional, Tuple, Union

from web3 import Web3

from ..exceptions import (
    InvalidCollectionIdError,
    InvalidIndexSetError,
    InvalidSlotCountError,
)
from ..utils.validators import (
    MAX_UINT256,
    ZERO_BYTES32,
    to_hex32,
    validate_address,
    validate_bytes32,
    validate_uint256,
)

# alt_bn128: y^2 = x^3 + 3 over F_P
FIELD_MODULUS = 21888242871839275222246405745257275088696311157297823662689037894645226208583
CURVE_B = 3
_SQRT_EXPONENT = (FIELD_MODULUS + 1) // 4  # P % 4 == 3

# prepareCondition accepts 2..256 outcome slots (one bit of uint256 each)
MIN_OUTCOME_SLOTS = 2
MAX_OUTCOME_SLOTS = 256
MAX_OUTCOME_INDEX = MAX_OUTCOME_SLOTS - 1

_BIT_254 = 1 << 254
_LOW_254_MASK = _BIT_254 - 1

Point = Tuple[int, int]


def validate_outcome_slot_count(outcome_slot_count: int) -> int:
    """
    Check an outcome slot count against the range prepareCondition accepts.

    Raises:
        InvalidSlotCountError: If count < 2 or > 256
    """
    if isinstance(outcome_slot_count, bool) or not isinstance(outcome_slot_count, int):
        raise InvalidSlotCountError(
            f"outcome_slot_count must be an integer, got {type(outcome_slot_count)}"
        )
    if outcome_slot_count < MIN_OUTCOME_SLOTS:
        raise InvalidSlotCountError(
            f"outcome_slot_count must be at least {MIN_OUTCOME_SLOTS}, got {outcome_slot_count}",
            outcome_slot_count=outcome_slot_count,
        )
    if outcome_slot_count > MAX_OUTCOME_SLOTS:
        raise InvalidSlotCountError(
            f"outcome_slot_count {outcome_slot_count} exceeds maximum {MAX_OUTCOME_SLOTS}",
            outcome_slot_count=outcome_slot_count,
        )
    return outcome_slot_count


def full_index_set(outcome_slot_count: int) -> int:
    """Index set with every outcome slot of the condition selected."""
    validate_outcome_slot_count(outcome_slot_count)
    return (1 << outcome_slot_count) - 1


def binary_partition() -> List[int]:
    """Canonical YES/NO partition [0b01, 0b10] for two-outcome conditions."""
    return [0b01, 0b10]


def derive_condition_id(oracle: str, question_id: Union[bytes, str], outcome_slot_count: int) -> bytes:
    """
    Derive a condition ID.

    Args:
        oracle: Address allowed to report the outcome
        question_id: 32-byte question identifier
        outcome_slot_count: Number of outcomes (2..256)

    Returns:
        32-byte condition ID

    Raises:
        InvalidSlotCountError: If outcome_slot_count is out of range
        ValidationError: If oracle or question_id are malformed

    Example:
        >>> derive_condition_id(oracle, "0x" + "00" * 31 + "01", 2).hex()
        '48549c6a...'
    """
    outcome_slot_count = validate_outcome_slot_count(outcome_slot_count)
    oracle_bytes = bytes.fromhex(validate_address(oracle)[2:])
    question_bytes = validate_bytes32(question_id, "question_id")

    packed = oracle_bytes + question_bytes + outcome_slot_count.to_bytes(32, byteorder="big")
    return bytes(Web3.keccak(packed))


def _sqrt(value: int) -> int:
    return pow(value, _SQRT_EXPONENT, FIELD_MODULUS)


def _curve_rhs(x: int) -> int:
    return (pow(x, 3, FIELD_MODULUS) + CURVE_B) % FIELD_MODULUS


def _with_parity(y: int, odd: bool) -> int:
    """Pick y or P - y so that its parity matches odd."""
    if (y % 2 == 1) != odd:
        return FIELD_MODULUS - y
    return y


def _hash_to_point(condition_id: bytes, index_set: int) -> Point:
    x = int.from_bytes(
        Web3.keccak(condition_id + index_set.to_bytes(32, byteorder="big")),
        byteorder="big",
    )
    odd = (x >> 255) != 0

    # Walk x forward until x^3 + 3 is a quadratic residue
    while True:
        x = (x + 1) % FIELD_MODULUS
        yy = _curve_rhs(x)
        y = _sqrt(yy)
        if y * y % FIELD_MODULUS == yy:
            break

    return x, _with_parity(y, odd)


def _decompress(collection_id: bytes) -> Point:
    """
    Recover the curve point encoded in a collection ID.

    Bit 254 carries the parity of y; bits 255 and 254 are not part of x.
    """
    value = int.from_bytes(collection_id, byteorder="big")
    odd = (value >> 254) != 0
    x = value & _LOW_254_MASK
    yy = _curve_rhs(x)
    y = _with_parity(_sqrt(yy), odd)

    if x >= FIELD_MODULUS or y * y % FIELD_MODULUS != yy:
        raise InvalidCollectionIdError(
            f"Invalid parent collection ID {to_hex32(collection_id)}: not a point on alt_bn128",
            collection_id=to_hex32(collection_id),
        )
    return x, y


def _ec_add(p1: Point, p2: Point) -> Point:
    """Affine point addition; (0, 0) is the point at infinity, as in the ecAdd precompile."""
    x1, y1 = p1
    x2, y2 = p2
    p = FIELD_MODULUS

    if p1 == (0, 0):
        return p2
    if p2 == (0, 0):
        return p1

    if x1 == x2:
        if (y1 + y2) % p == 0:
            return 0, 0
        slope = 3 * x1 * x1 * pow(2 * y1, -1, p) % p
    else:
        slope = (y2 - y1) * pow(x2 - x1, -1, p) % p

    x3 = (slope * slope - x1 - x2) % p
    y3 = (slope * (x1 - x3) - y1) % p
    return x3, y3


def validate_index_set(index_set: int, outcome_slot_count: Optional[int] = None) -> int:
    """
    Check one index set: non-zero, uint256, and below 2**outcome_slot_count
    when a slot count is given.

    Raises:
        InvalidIndexSetError: If the index set is out of range
    """
    if isinstance(index_set, bool) or not isinstance(index_set, int):
        raise InvalidIndexSetError(f"index_set must be an integer, got {type(index_set)}")
    if index_set <= 0:
        raise InvalidIndexSetError(
            "index_set cannot be 0 (no outcome slots selected)"
            if index_set == 0 else f"index_set must be positive, got {index_set}",
            index_set=index_set,
            outcome_slot_count=outcome_slot_count,
        )
    if index_set > MAX_UINT256:
        raise InvalidIndexSetError(
            f"index_set {index_set} exceeds maximum {MAX_UINT256} (uint256 max)",
            index_set=index_set,
            outcome_slot_count=outcome_slot_count,
        )
    if outcome_slot_count is not None:
        validate_outcome_slot_count(outcome_slot_count)
        if index_set >> outcome_slot_count:
            raise InvalidIndexSetError(
                f"index_set {index_set} must be below 2**{outcome_slot_count} "
                f"for a condition with {outcome_slot_count} outcome slots",
                index_set=index_set,
                outcome_slot_count=outcome_slot_count,
            )
    return index_set


def derive_collection_id(
    parent_collection_id: Union[bytes, str],
    condition_id: Union[bytes, str],
    index_set: int,
    outcome_slot_count: Optional[int] = None,
) -> bytes:
    """
    Derive a collection ID.

    A zero parent yields a top-level collection. A non-zero parent is
    decoded to its curve point and added to this condition's point, so
    nesting order does not matter and nested IDs never equal top-level ones.

    Args:
        parent_collection_id: 32-byte parent collection ID (zero for top level)
        condition_id: 32-byte condition ID
        index_set: Bitmask of selected outcome slots
        outcome_slot_count: Slot count of the condition, enables the upper bound check

    Returns:
        32-byte collection ID

    Raises:
        InvalidIndexSetError: If index_set is 0 or too wide
        InvalidCollectionIdError: If the parent is not a valid collection ID
    """
    parent = validate_bytes32(parent_collection_id, "parent_collection_id")
    condition = validate_bytes32(condition_id, "condition_id")
    index_set = validate_index_set(index_set, outcome_slot_count)

    point = _hash_to_point(condition, index_set)

    if int.from_bytes(parent, byteorder="big") != 0:
        point = _ec_add(point, _decompress(parent))

    x, y = point
    if y % 2 == 1:
        x ^= _BIT_254

    return x.to_bytes(32, byteorder="big")


def derive_position_id(collateral_token: str, collection_id: Union[bytes, str]) -> int:
    """
    Derive the ERC1155 position (token) ID.

    Args:
        collateral_token: Collateral ERC20 address (e.g., USDC)
        collection_id: 32-byte collection ID

    Returns:
        Position ID as uint256
    """
    token_bytes = bytes.fromhex(validate_address(collateral_token)[2:])
    collection = validate_bytes32(collection_id, "collection_id")

    return int.from_bytes(Web3.keccak(token_bytes + collection), byteorder="big")


def calculate_index_set(outcome_indices: List[int]) -> int:
    """
    Calculate index set bitmask from outcome indices.

    Bit i is set if outcome i is selected.

    Raises:
        ValueError: If any outcome index exceeds MAX_OUTCOME_INDEX (255)

    Example:
        Outcomes [0, 2] → 0b101 → 5
        Outcomes [1, 3] → 0b1010 → 10
    """
    if not outcome_indices:
        return 0

    for idx in outcome_indices:
        if idx < 0:
            raise ValueError(f"Outcome index {idx} must be non-negative")
        if idx > MAX_OUTCOME_INDEX:
            raise ValueError(
                f"Outcome index {idx} exceeds maximum {MAX_OUTCOME_INDEX}. "
                f"Solidity uint256 supports max 256 outcomes (indices 0-255)."
            )

    index_set = 0
    for idx in outcome_indices:
        index_set |= (1 << idx)

    return index_set


def parse_index_set(index_set: int, total_outcomes: int) -> List[int]:
    """
    Parse index set bitmask to outcome indices.

    Example:
        index_set=5 (0b101), total=3 → [0, 2]
    """
    validate_uint256(index_set, "index_set")
    if total_outcomes < 0:
        raise ValueError(f"total_outcomes must be non-negative, got {total_outcomes}")
    if total_outcomes > MAX_OUTCOME_SLOTS:
        raise ValueError(
            f"total_outcomes {total_outcomes} exceeds maximum {MAX_OUTCOME_SLOTS}. "
            f"Solidity uint256 supports max 256 outcomes."
        )

    return [i for i in range(total_outcomes) if index_set & (1 << i)]


class IdentifierCodec:
    """
    Identifier derivation for one condition shape.

    Binds the outcome slot count so collection IDs always get the index
    set upper bound check.

    Example:
        >>> codec = IdentifierCodec(outcome_slot_count=2)
        >>> condition_id = codec.condition_id(UMA_CTF_ADAPTER, question_id)
        >>> yes = codec.position_id(USDC_ADDRESS, codec.collection_id(condition_id, 0b01))
    """

    def __init__(self, outcome_slot_count: int = 2):
        self.outcome_slot_count = validate_outcome_slot_count(outcome_slot_count)

    def condition_id(self, oracle: str, question_id: Union[bytes, str]) -> bytes:
        return derive_condition_id(oracle, question_id, self.outcome_slot_count)

    def collection_id(
        self,
        condition_id: Union[bytes, str],
        index_set: int,
        parent_collection_id: Union[bytes, str] = ZERO_BYTES32,
    ) -> bytes:
        return derive_collection_id(
            parent_collection_id, condition_id, index_set, self.outcome_slot_count
        )

    @staticmethod
    def position_id(collateral_token: str, collection_id: Union[bytes, str]) -> int:
        return derive_position_id(collateral_token, collection_id)

    def position_ids(
        self,
        collateral_token: str,
        condition_id: Union[bytes, str],
        index_sets: List[int],
        parent_collection_id: Union[bytes, str] = ZERO_BYTES32,
    ) -> List[int]:
        """Position IDs for each index set, in order."""
        return [
            derive_position_id(
                collateral_token,
                self.collection_id(condition_id, index_set, parent_collection_id),
            )
            for index_set in index_sets
        ]
