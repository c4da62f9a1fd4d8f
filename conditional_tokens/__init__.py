"""
Conditional Tokens Client Library

Client for the Gnosis Conditional Tokens Framework as deployed on Polygon:
deterministic condition, collection and position IDs, partition
validation, and split / merge / redeem submission.

Contract reference (LGPL-3.0):
- https://github.com/gnosis/conditional-tokens-contracts
"""

from .ctf.client import CTFClient
from .ctf.submitter import TransactionSubmitter, Web3TransactionSubmitter
from .ctf import (
    CTF_ADDRESS,
    USDC_ADDRESS,
    IdentifierCodec,
    PartitionValidator,
    PositionOperationBuilder,
    build_merge,
    build_redeem,
    build_split,
    derive_collection_id,
    derive_condition_id,
    derive_position_id,
    validate_partition,
)
from .config import CTFSettings, get_settings
from .models import (
    OperationKind,
    PositionOperation,
    OperationReceipt,
    ConditionIdRequest,
    ConditionIdResponse,
    CollectionIdRequest,
    CollectionIdResponse,
    PositionIdRequest,
    PositionIdResponse,
    SplitPositionRequest,
    SplitPositionResponse,
    MergePositionsRequest,
    MergePositionsResponse,
    RedeemPositionsRequest,
    RedeemPositionsResponse,
    ZERO_COLLECTION_ID,
)
from .exceptions import (
    CTFError,
    ValidationError,
    InvalidSlotCountError,
    InvalidIndexSetError,
    InvalidCollectionIdError,
    ZeroAmountError,
    PartitionError,
    EmptyPartitionError,
    IndexSetOutOfRangeError,
    OverlappingIndexSetsError,
    DuplicateIndexSetError,
    IncompleteCoverageError,
    SubmissionError,
    RPCError,
    TransactionRevertedError,
    ReceiptTimeoutError,
    GasPriceTooHighError,
    InsufficientBalanceError,
    ConditionNotResolvedError,
    ContractCallRevertedError,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "CTFClient",

    # Submission
    "TransactionSubmitter",
    "Web3TransactionSubmitter",

    # Core
    "CTF_ADDRESS",
    "USDC_ADDRESS",
    "IdentifierCodec",
    "PartitionValidator",
    "PositionOperationBuilder",
    "build_merge",
    "build_redeem",
    "build_split",
    "derive_collection_id",
    "derive_condition_id",
    "derive_position_id",
    "validate_partition",

    # Settings
    "CTFSettings",
    "get_settings",

    # Types
    "OperationKind",
    "PositionOperation",
    "OperationReceipt",
    "ConditionIdRequest",
    "ConditionIdResponse",
    "CollectionIdRequest",
    "CollectionIdResponse",
    "PositionIdRequest",
    "PositionIdResponse",
    "SplitPositionRequest",
    "SplitPositionResponse",
    "MergePositionsRequest",
    "MergePositionsResponse",
    "RedeemPositionsRequest",
    "RedeemPositionsResponse",
    "ZERO_COLLECTION_ID",

    # Exceptions
    "CTFError",
    "ValidationError",
    "InvalidSlotCountError",
    "InvalidIndexSetError",
    "InvalidCollectionIdError",
    "ZeroAmountError",
    "PartitionError",
    "EmptyPartitionError",
    "IndexSetOutOfRangeError",
    "OverlappingIndexSetsError",
    "DuplicateIndexSetError",
    "IncompleteCoverageError",
    "SubmissionError",
    "RPCError",
    "TransactionRevertedError",
    "ReceiptTimeoutError",
    "GasPriceTooHighError",
    "InsufficientBalanceError",
    "ConditionNotResolvedError",
    "ContractCallRevertedError",
]
