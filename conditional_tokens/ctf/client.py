"""
Conditional Tokens client.

Unified interface for identifier calculation and position operations.
Identifier requests are answered locally; split, merge and redeem are
validated and built locally, then handed to a TransactionSubmitter.
"""

import logging
from typing import Any, Dict, List, Optional

from web3 import Web3
from web3.exceptions import ContractLogicError

from ..config import CTFSettings, get_settings
from ..exceptions import (
    ConditionNotResolvedError,
    ContractCallRevertedError,
    InsufficientBalanceError,
    RPCError,
    SubmissionError,
)
from ..metrics import Metrics, get_metrics
from ..models import (
    CollectionIdRequest,
    CollectionIdResponse,
    ConditionIdRequest,
    ConditionIdResponse,
    MergePositionsRequest,
    MergePositionsResponse,
    OperationKind,
    PositionIdRequest,
    PositionIdResponse,
    PositionOperation,
    RedeemPositionsRequest,
    RedeemPositionsResponse,
    SplitPositionRequest,
    SplitPositionResponse,
    ZERO_COLLECTION_ID,
)
from ..utils.retry import RetryStrategy
from ..utils.structured_logging import clear_correlation_id, get_logger, set_correlation_id
from ..utils.validators import to_hex32, validate_address, validate_bytes32
from .abi import CONDITIONAL_TOKENS_ABI, ERC20_ABI
from .identifiers import derive_collection_id, derive_condition_id, derive_position_id
from .operations import build_merge, build_redeem, build_split
from .submitter import TransactionSubmitter, Web3TransactionSubmitter

logger = logging.getLogger(__name__)
events = get_logger(__name__)


class CTFClient:
    """
    Main client for Conditional Tokens operations.

    Features:
    - Local condition, collection and position ID calculation
    - Split, merge and redeem with all validation before submission
    - Optional on-chain cross-checks and pre-flight reads
    - Read-only RPC calls retried with backoff

    Usage:
        client = CTFClient.from_settings(private_key=key)
        cid = client.calculate_condition_id(ConditionIdRequest(
            oracle=UMA_CTF_ADAPTER, question_id=question_id, outcome_slot_count=2
        )).condition_id
        response = client.split_position(SplitPositionRequest(
            collateral_token=USDC_ADDRESS, condition_id=cid,
            partition=[1, 2], amount=100_000_000
        ))
    """

    def __init__(
        self,
        submitter: Optional[TransactionSubmitter] = None,
        web3: Optional[Web3] = None,
        settings: Optional[CTFSettings] = None,
        metrics: Optional[Metrics] = None,
        retry: Optional[RetryStrategy] = None,
    ):
        """
        Initialize client.

        Args:
            submitter: Transaction submitter (None = identifier calculation only)
            web3: Web3 instance for on-chain reads (default: the submitter's)
            settings: Optional settings (loads from env if not provided)
            metrics: Optional metrics collector (default: from settings)
            retry: Retry strategy for read-only calls
        """
        self.settings = settings or get_settings()
        self.submitter = submitter

        if web3 is None and isinstance(submitter, Web3TransactionSubmitter):
            web3 = submitter.web3
        self.web3 = web3

        self.metrics = metrics or get_metrics(
            enabled=self.settings.enable_metrics,
            port=self.settings.metrics_port
        )
        self.retry = retry or RetryStrategy(
            max_retries=self.settings.max_retries,
            base_delay=self.settings.retry_base_delay,
            max_delay=self.settings.retry_max_delay,
        )

        self._ctf = None
        if self.web3 is not None:
            self._ctf = self.web3.eth.contract(
                address=Web3.to_checksum_address(self.settings.ctf_address),
                abi=CONDITIONAL_TOKENS_ABI
            )

        logger.info("Conditional Tokens client initialized")

    @classmethod
    def from_settings(
        cls,
        private_key: Optional[str] = None,
        settings: Optional[CTFSettings] = None,
    ) -> "CTFClient":
        """
        Build a client connected to settings.rpc_url.

        Without a private key the client can calculate identifiers and read
        chain state but cannot submit operations.
        """
        settings = settings or get_settings()
        metrics = get_metrics(enabled=settings.enable_metrics, port=settings.metrics_port)

        if private_key:
            submitter = Web3TransactionSubmitter.from_settings(
                private_key, settings=settings, metrics=metrics
            )
            return cls(submitter=submitter, settings=settings, metrics=metrics)

        web3 = Web3(Web3.HTTPProvider(settings.rpc_url)) if settings.rpc_url else None
        return cls(web3=web3, settings=settings, metrics=metrics)

    # ========== Identifiers ==========

    def calculate_condition_id(self, request: ConditionIdRequest) -> ConditionIdResponse:
        """
        Calculate a condition ID.

        Raises:
            InvalidSlotCountError: If outcome_slot_count is outside [2, 256]
        """
        condition_id = derive_condition_id(
            request.oracle, request.question_id, request.outcome_slot_count
        )
        return ConditionIdResponse(condition_id=to_hex32(condition_id))

    def calculate_collection_id(self, request: CollectionIdRequest) -> CollectionIdResponse:
        """
        Calculate a collection ID.

        Raises:
            InvalidIndexSetError: If index_set is 0 or too wide for the slot count
            InvalidCollectionIdError: If the parent is not a valid collection ID
        """
        collection_id = derive_collection_id(
            request.parent_collection_id,
            request.condition_id,
            request.index_set,
            request.outcome_slot_count,
        )
        return CollectionIdResponse(collection_id=to_hex32(collection_id))

    def calculate_position_id(self, request: PositionIdRequest) -> PositionIdResponse:
        """Calculate a position (ERC1155 token) ID."""
        return PositionIdResponse(
            position_id=derive_position_id(request.collateral_token, request.collection_id)
        )

    # ========== Position Operations ==========

    def split_position(
        self,
        request: SplitPositionRequest,
        check_balance: bool = False,
    ) -> SplitPositionResponse:
        """
        Split collateral (or a parent position) into outcome positions.

        Args:
            request: Split parameters
            check_balance: Read the sender's balance before submitting

        Returns:
            SplitPositionResponse with one position ID per partition entry

        Raises:
            ValidationError: Before any network call, on invalid input
            SubmissionError: If the transaction could not be confirmed
        """
        operation = build_split(
            request.collateral_token,
            request.condition_id,
            request.partition,
            request.amount,
            request.parent_collection_id,
            request.outcome_slot_count,
        )
        self.metrics.track_operation_built(operation.kind.value)

        if check_balance:
            self._ensure_balance(operation)

        return self._execute(operation, SplitPositionResponse)

    def merge_positions(
        self,
        request: MergePositionsRequest,
        check_balance: bool = False,
    ) -> MergePositionsResponse:
        """
        Merge outcome positions back into collateral (or the parent position).

        Args:
            request: Merge parameters
            check_balance: Read the sender's position balances before submitting

        Raises:
            ValidationError: Before any network call, on invalid input
            SubmissionError: If the transaction could not be confirmed
        """
        operation = build_merge(
            request.collateral_token,
            request.condition_id,
            request.partition,
            request.amount,
            request.parent_collection_id,
            request.outcome_slot_count,
        )
        self.metrics.track_operation_built(operation.kind.value)

        if check_balance:
            self._ensure_balance(operation)

        return self._execute(operation, MergePositionsResponse)

    def redeem_positions(
        self,
        request: RedeemPositionsRequest,
        check_resolution: bool = False,
    ) -> RedeemPositionsResponse:
        """
        Redeem positions of a resolved condition.

        Args:
            request: Redeem parameters
            check_resolution: Read payoutDenominator before submitting

        Raises:
            ValidationError: Before any network call, on invalid input
            ConditionNotResolvedError: If check_resolution and the oracle has not reported
            SubmissionError: If the transaction could not be confirmed
        """
        operation = build_redeem(
            request.collateral_token,
            request.condition_id,
            request.index_sets,
            request.parent_collection_id,
            request.outcome_slot_count,
            request.require_full_coverage,
        )
        self.metrics.track_operation_built(operation.kind.value)

        if check_resolution and not self.is_condition_resolved(operation.condition_id):
            raise ConditionNotResolvedError(
                f"Condition {operation.condition_id} is not resolved",
                condition_id=operation.condition_id
            )

        return self._execute(operation, RedeemPositionsResponse)

    def _execute(self, operation: PositionOperation, response_cls):
        if self.submitter is None:
            raise SubmissionError(
                "No transaction submitter configured (pass private_key or submitter)",
                operation.context()
            )

        correlation_id = set_correlation_id()
        events.info(
            "operation_submitting",
            f"Submitting {operation.method_name}",
            correlation_id=correlation_id,
            **operation.context()
        )
        try:
            receipt = self.submitter.submit(operation)
        except SubmissionError as e:
            events.error(
                "operation_failed",
                str(e),
                error_type=type(e).__name__,
                details=e.details
            )
            raise
        finally:
            clear_correlation_id()

        return response_cls(
            transaction_hash=receipt.transaction_hash,
            block_number=receipt.block_number,
            position_ids=list(operation.position_ids),
        )

    # ========== On-chain Reads ==========

    def _call(self, function_name: str, *args: Any) -> Any:
        """Call a ConditionalTokens view with retry."""
        if self._ctf is None:
            raise RPCError("No web3 connection configured for on-chain reads")
        return self.retry.execute(self._call_once, self._ctf, function_name, *args)

    @staticmethod
    def _call_once(contract, function_name: str, *args: Any) -> Any:
        try:
            return getattr(contract.functions, function_name)(*args).call()
        except ContractLogicError as e:
            # A revert repeats on every attempt
            raise ContractCallRevertedError(
                f"{function_name} call reverted: {e}",
                function=function_name,
                reason=str(e)
            ) from e
        except Exception as e:
            raise RPCError(
                f"{function_name} call failed: {type(e).__name__}: {e}",
                {"function": function_name}
            ) from e

    def is_condition_resolved(self, condition_id: str) -> bool:
        """Check whether the oracle has reported payouts for a condition."""
        condition = validate_bytes32(condition_id, "condition_id")
        return self._call("payoutDenominator", condition) > 0

    def get_outcome_slot_count(self, condition_id: str) -> int:
        """
        Get the slot count the condition was prepared with.

        Returns:
            Slot count (0 if the condition was never prepared)
        """
        condition = validate_bytes32(condition_id, "condition_id")
        return self._call("getOutcomeSlotCount", condition)

    def get_position_balances(self, owner: str, position_ids: List[int]) -> Dict[int, int]:
        """
        Get ERC1155 balances for several positions.

        Returns:
            Dict mapping position_id -> balance (base units)
        """
        owner = validate_address(owner)
        balances = self._call("balanceOfBatch", [owner] * len(position_ids), list(position_ids))
        return dict(zip(position_ids, balances))

    def get_collateral_balance(self, owner: str, collateral_token: Optional[str] = None) -> int:
        """Get the ERC20 collateral balance of owner (base units)."""
        if self.web3 is None:
            raise RPCError("No web3 connection configured for on-chain reads")

        token = self.web3.eth.contract(
            address=validate_address(collateral_token or self.settings.collateral_address),
            abi=ERC20_ABI
        )
        return self.retry.execute(self._call_once, token, "balanceOf", validate_address(owner))

    def _ensure_balance(self, operation: PositionOperation) -> None:
        """
        Raises:
            InsufficientBalanceError: If the sender cannot cover the operation
        """
        owner = getattr(self.submitter, "address", None)
        if owner is None:
            raise SubmissionError("Balance check needs a submitter with an address")

        if operation.kind == OperationKind.SPLIT:
            if operation.parent_collection_id == ZERO_COLLECTION_ID:
                balances = {"collateral": self.get_collateral_balance(owner, operation.collateral_token)}
            else:
                parent_position = derive_position_id(
                    operation.collateral_token, operation.parent_collection_id
                )
                balances = self.get_position_balances(owner, [parent_position])
        else:
            balances = self.get_position_balances(owner, list(operation.position_ids))

        short = {str(k): v for k, v in balances.items() if v < operation.amount}
        if short:
            raise InsufficientBalanceError(
                f"Insufficient balance for {operation.kind.value} of {operation.amount}: {short}",
                {**operation.context(), "balances": short}
            )

    def verify_condition_id(self, request: ConditionIdRequest) -> bool:
        """Compare the locally derived condition ID with the contract's getConditionId."""
        local = derive_condition_id(request.oracle, request.question_id, request.outcome_slot_count)
        remote = bytes(self._call(
            "getConditionId",
            request.oracle,
            validate_bytes32(request.question_id, "question_id"),
            request.outcome_slot_count,
        ))
        if remote != local:
            logger.error(
                f"Condition ID mismatch: local {to_hex32(local)}, contract {to_hex32(remote)}"
            )
            return False
        return True

    def verify_operation(self, operation: PositionOperation) -> bool:
        """
        Compare an operation's derived collection and position IDs with the
        contract's getCollectionId / getPositionId views.

        Returns:
            True if every ID matches
        """
        parent = validate_bytes32(operation.parent_collection_id, "parent_collection_id")
        condition = validate_bytes32(operation.condition_id, "condition_id")
        matches = True

        for index_set, collection_id, position_id in zip(
            operation.index_sets, operation.collection_ids, operation.position_ids
        ):
            remote_collection = to_hex32(bytes(
                self._call("getCollectionId", parent, condition, index_set)
            ))
            remote_position = self._call(
                "getPositionId", operation.collateral_token, validate_bytes32(collection_id)
            )

            if remote_collection != collection_id or remote_position != position_id:
                logger.error(
                    f"ID mismatch for index set {index_set}: "
                    f"local ({collection_id}, {position_id}), "
                    f"contract ({remote_collection}, {remote_position})"
                )
                matches = False

        return matches
