"""Tests for validators."""

import pytest

from ..utils.validators import (
    MAX_UINT256,
    ZERO_BYTES32,
    to_hex32,
    validate_address,
    validate_bytes32,
    validate_private_key,
    validate_uint256,
)
from ..exceptions import ValidationError


def test_validate_address():
    """Test address validation."""
    usdc = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
    assert validate_address(usdc) == usdc
    assert validate_address(usdc.lower()) == usdc
    assert validate_address(usdc[2:]) == usdc

    with pytest.raises(ValidationError):
        validate_address("0x1234")  # Too short

    with pytest.raises(ValidationError):
        validate_address("0x" + "zz" * 20)  # Not hex

    with pytest.raises(ValidationError):
        validate_address(None)


def test_validate_bytes32():
    """Test bytes32 validation."""
    assert validate_bytes32(ZERO_BYTES32) == ZERO_BYTES32
    assert validate_bytes32("0x" + "00" * 32) == ZERO_BYTES32
    assert validate_bytes32("ab" * 32) == b"\xab" * 32

    with pytest.raises(ValidationError):
        validate_bytes32(b"\x00" * 31)  # Too short

    with pytest.raises(ValidationError):
        validate_bytes32("0x" + "0" * 63)  # Odd length

    with pytest.raises(ValidationError):
        validate_bytes32(123)


def test_validate_bytes32_names_field():
    with pytest.raises(ValidationError, match="condition_id"):
        validate_bytes32("0x12", "condition_id")


def test_uppercase_hex_prefix():
    assert validate_bytes32("0X" + "ab" * 32) == b"\xab" * 32
    assert validate_uint256("0XFF") == 255
    assert validate_address("0X2791BCA1F2DE4661ED88A30C99A7A9449AA84174") == (
        "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
    )


def test_validate_uint256():
    """Test uint256 validation."""
    assert validate_uint256(0) == 0
    assert validate_uint256(MAX_UINT256) == MAX_UINT256
    assert validate_uint256("100") == 100
    assert validate_uint256("0xff") == 255

    with pytest.raises(ValidationError):
        validate_uint256(-1)  # Negative

    with pytest.raises(ValidationError):
        validate_uint256(MAX_UINT256 + 1)  # Overflow

    with pytest.raises(ValidationError):
        validate_uint256(True)  # Bool

    with pytest.raises(ValidationError):
        validate_uint256(1.5)  # Float

    with pytest.raises(ValidationError):
        validate_uint256("abc")


def test_validate_private_key():
    key = "4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
    assert validate_private_key(key) == "0x" + key
    assert validate_private_key("0x" + key.upper()) == "0x" + key

    with pytest.raises(ValidationError) as exc_info:
        validate_private_key("0x1234")
    assert "1234" not in str(exc_info.value)


def test_to_hex32():
    assert to_hex32(ZERO_BYTES32) == "0x" + "00" * 32
