"""
Custom exceptions for the Conditional Tokens client.

Two families:
- ValidationError: local, raised before any external call is attempted
- SubmissionError: raised by the transaction submission boundary
"""

from typing import Optional, Any


class CTFError(Exception):
    """Base exception for all Conditional Tokens errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# Validation exceptions
class ValidationError(CTFError):
    """Input validation failed."""
    pass


class InvalidSlotCountError(ValidationError):
    """Outcome slot count outside the supported range."""

    def __init__(self, message: str, outcome_slot_count: Optional[int] = None):
        super().__init__(message, {"outcome_slot_count": outcome_slot_count})
        self.outcome_slot_count = outcome_slot_count


class InvalidIndexSetError(ValidationError):
    """Index set is empty or wider than the condition allows."""

    def __init__(self, message: str, index_set: Optional[int] = None,
                 outcome_slot_count: Optional[int] = None):
        super().__init__(message, {"index_set": index_set,
                                   "outcome_slot_count": outcome_slot_count})
        self.index_set = index_set
        self.outcome_slot_count = outcome_slot_count


class InvalidCollectionIdError(ValidationError):
    """Parent collection ID does not decode to a curve point."""

    def __init__(self, message: str, collection_id: Optional[str] = None):
        super().__init__(message, {"collection_id": collection_id})
        self.collection_id = collection_id


class ZeroAmountError(ValidationError):
    """Split/merge amount must be positive."""

    def __init__(self, message: str, amount: Optional[int] = None):
        super().__init__(message, {"amount": amount})
        self.amount = amount


class PartitionError(ValidationError):
    """Base exception for invalid index-set partitions."""

    def __init__(self, message: str, partition: Optional[list[int]] = None,
                 **extra: Any):
        super().__init__(message, {"partition": partition, **extra})
        self.partition = partition


class EmptyPartitionError(PartitionError):
    """Partition has no index sets."""
    pass


class IndexSetOutOfRangeError(PartitionError):
    """Partition entry is zero or not below 2**outcome_slot_count."""

    def __init__(self, message: str, partition: Optional[list[int]] = None,
                 index_set: Optional[int] = None):
        super().__init__(message, partition, index_set=index_set)
        self.index_set = index_set


class OverlappingIndexSetsError(PartitionError):
    """Two partition entries share an outcome slot."""

    def __init__(self, message: str, partition: Optional[list[int]] = None,
                 first: Optional[int] = None, second: Optional[int] = None):
        super().__init__(message, partition, first=first, second=second)
        self.first = first
        self.second = second


class DuplicateIndexSetError(OverlappingIndexSetsError):
    """Same index set listed more than once (an overlap with itself)."""

    def __init__(self, message: str, partition: Optional[list[int]] = None,
                 index_set: Optional[int] = None):
        super().__init__(message, partition, first=index_set, second=index_set)
        self.details["index_set"] = index_set
        self.index_set = index_set


class IncompleteCoverageError(PartitionError):
    """Partition union does not cover every outcome slot."""

    def __init__(self, message: str, partition: Optional[list[int]] = None,
                 missing: Optional[int] = None):
        super().__init__(message, partition, missing=missing)
        self.missing = missing


# Submission exceptions
class SubmissionError(CTFError):
    """Base exception for transaction submission failures."""
    pass


class RPCError(SubmissionError):
    """RPC node unreachable or returned an error."""
    pass


class TransactionRevertedError(SubmissionError):
    """Transaction was mined but reverted."""

    def __init__(self, message: str, transaction_hash: Optional[str] = None,
                 block_number: Optional[int] = None, reason: Optional[str] = None,
                 details: Optional[dict[str, Any]] = None):
        super().__init__(message, {
            **(details or {}),
            "transaction_hash": transaction_hash,
            "block_number": block_number,
            "reason": reason,
        })
        self.transaction_hash = transaction_hash
        self.block_number = block_number
        self.reason = reason


class ReceiptTimeoutError(SubmissionError):
    """Transaction was sent but not confirmed in time."""

    def __init__(self, message: str, transaction_hash: Optional[str] = None,
                 details: Optional[dict[str, Any]] = None):
        super().__init__(message, {**(details or {}), "transaction_hash": transaction_hash})
        self.transaction_hash = transaction_hash


class GasPriceTooHighError(SubmissionError):
    """Gas price exceeds the configured ceiling."""
    pass


class InsufficientBalanceError(SubmissionError):
    """Wallet balance too low for the operation."""
    pass


class ConditionNotResolvedError(SubmissionError):
    """Redeem attempted on a condition the oracle has not reported."""

    def __init__(self, message: str, condition_id: Optional[str] = None):
        super().__init__(message, {"condition_id": condition_id})
        self.condition_id = condition_id


class ContractCallRevertedError(SubmissionError):
    """Read-only contract call reverted. Deterministic, never retried."""

    def __init__(self, message: str, function: Optional[str] = None,
                 reason: Optional[str] = None):
        super().__init__(message, {"function": function, "reason": reason})
        self.function = function
        self.reason = reason
