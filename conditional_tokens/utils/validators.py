"""
Input validation utilities.

Normalises addresses, 32-byte hashes and uint256 values before they reach
the identifier codec or the contract call builder.
"""

import re
from typing import Any, Union

from web3 import Web3

from ..exceptions import ValidationError


MAX_UINT256 = 2**256 - 1
ZERO_BYTES32 = b"\x00" * 32

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def _strip_0x(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def validate_address(address: str) -> str:
    """
    Validate Ethereum address.

    Args:
        address: Ethereum address

    Returns:
        Checksummed address

    Raises:
        ValidationError: If address is invalid
    """
    if not isinstance(address, str):
        raise ValidationError(f"Address must be string, got {type(address)}")

    addr = _strip_0x(address)

    # Validate hex format and length (20 bytes = 40 hex chars)
    if not re.match(r"^[0-9a-fA-F]{40}$", addr):
        raise ValidationError(f"Invalid Ethereum address: {address}")

    return Web3.to_checksum_address(f"0x{addr}")


def validate_bytes32(value: Union[bytes, str], name: str = "value") -> bytes:
    """
    Validate a 32-byte hash given as bytes or hex string.

    Args:
        value: Raw bytes or hex string (with or without 0x)
        name: Field name used in error messages

    Returns:
        32 raw bytes

    Raises:
        ValidationError: If value is not exactly 32 bytes
    """
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        hex_part = _strip_0x(value)
        if not _HEX_RE.match(hex_part) or len(hex_part) % 2:
            raise ValidationError(f"{name} must be hex string, got {value}")
        raw = bytes.fromhex(hex_part)
    else:
        raise ValidationError(f"{name} must be bytes or hex string, got {type(value)}")

    if len(raw) != 32:
        raise ValidationError(f"{name} must be 32 bytes (bytes32), got {len(raw)} bytes")

    return raw


def validate_uint256(value: Any, name: str = "value") -> int:
    """
    Validate an unsigned 256-bit integer.

    Accepts int or decimal/hex strings. Booleans are rejected.

    Raises:
        ValidationError: If value is not an integer in [0, 2**256)
    """
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got bool")

    if isinstance(value, str):
        try:
            value = int(value, 16) if value[:2] in ("0x", "0X") else int(value)
        except ValueError as e:
            raise ValidationError(f"Invalid {name} format: {value}") from e
    elif not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {type(value)}")

    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    if value > MAX_UINT256:
        raise ValidationError(f"{name} {value} exceeds maximum {MAX_UINT256} (uint256 max)")

    return value


def validate_private_key(private_key: str) -> str:
    """
    Validate private key format.

    Args:
        private_key: Private key hex string

    Returns:
        Normalized private key

    Raises:
        ValidationError: If private key is invalid
    """
    if not isinstance(private_key, str):
        raise ValidationError(f"Private key must be string, got {type(private_key)}")

    key = _strip_0x(private_key)

    # Validate hex format and length (32 bytes = 64 hex chars)
    if not re.match(r"^[0-9a-fA-F]{64}$", key):
        raise ValidationError("Invalid private key format")

    return f"0x{key.lower()}"


def to_hex32(value: bytes) -> str:
    """Format 32 raw bytes as 0x-prefixed lowercase hex."""
    return "0x" + value.hex()
