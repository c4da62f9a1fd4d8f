"""Utility modules for the Conditional Tokens client."""

from .validators import (
    validate_address,
    validate_bytes32,
    validate_uint256,
    validate_private_key,
    to_hex32,
)
from .retry import RetryStrategy
from .structured_logging import CredentialRedactionFilter, register_secret

__all__ = [
    "validate_address",
    "validate_bytes32",
    "validate_uint256",
    "validate_private_key",
    "to_hex32",
    "RetryStrategy",
    "CredentialRedactionFilter",
    "register_secret",
]
