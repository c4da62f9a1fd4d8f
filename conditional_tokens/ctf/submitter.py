"""
Transaction submission for position operations.

The builders in operations.py produce PositionOperation values; this module
is the only place that signs and sends them. Features:
- Gas price limits
- Thread-safe nonce management
- Private key kept out of repr, logs and error messages
- Failed receipts mapped to TransactionRevertedError with operation IDs

Transactions are sent exactly once. Split, merge and redeem are not
idempotent, so callers that want to retry a failed send must do so
explicitly after checking chain state.
"""

import logging
import threading
import time
from typing import Any, Dict, Optional, Protocol, Tuple

from eth_account import Account
from web3 import Web3
from web3.exceptions import TimeExhausted

from ..config import CTFSettings, get_settings
from ..exceptions import (
    GasPriceTooHighError,
    ReceiptTimeoutError,
    RPCError,
    SubmissionError,
    TransactionRevertedError,
)
from ..metrics import Metrics
from ..models import OperationKind, OperationReceipt, PositionOperation
from ..utils.retry import RetryStrategy
from ..utils.structured_logging import get_logger, register_secret
from ..utils.validators import validate_private_key
from .abi import CONDITIONAL_TOKENS_ABI

logger = logging.getLogger(__name__)
events = get_logger(__name__)


class TransactionSubmitter(Protocol):
    """Executes a PositionOperation and returns its receipt."""

    def submit(self, operation: PositionOperation) -> OperationReceipt:
        """
        Sign, send and confirm one operation.

        Raises:
            SubmissionError: On any network, signing or on-chain failure
        """
        ...


class Web3TransactionSubmitter:
    """
    web3.py implementation of TransactionSubmitter.

    Example:
        >>> submitter = Web3TransactionSubmitter.from_settings(private_key)
        >>> receipt = submitter.submit(build_split(USDC, condition_id, [1, 2], 10**6))
        >>> receipt.block_number
        51234567
    """

    def __init__(
        self,
        web3: Web3,
        private_key: str,
        settings: Optional[CTFSettings] = None,
        metrics: Optional[Metrics] = None,
        retry: Optional[RetryStrategy] = None,
    ):
        """
        Initialize submitter.

        Args:
            web3: Connected Web3 instance
            private_key: Signing key (with or without 0x prefix)
            settings: Client settings (default: from environment)
            metrics: Optional metrics collector
            retry: Retry strategy for receipt polling (default: from settings)
        """
        self.web3 = web3
        self.settings = settings or get_settings()
        self.metrics = metrics

        key = validate_private_key(private_key)
        register_secret(key)
        self._private_key = key
        self._account = Account.from_key(key)

        self.retry = retry or RetryStrategy(
            max_retries=self.settings.max_retries,
            base_delay=self.settings.retry_base_delay,
            max_delay=self.settings.retry_max_delay,
        )

        self.ctf = self.web3.eth.contract(
            address=Web3.to_checksum_address(self.settings.ctf_address),
            abi=CONDITIONAL_TOKENS_ABI
        )

        self._nonce_lock = threading.Lock()
        self._nonce_cache: Dict[str, Tuple[int, float]] = {}

    @classmethod
    def from_settings(
        cls,
        private_key: str,
        settings: Optional[CTFSettings] = None,
        metrics: Optional[Metrics] = None,
    ) -> "Web3TransactionSubmitter":
        """
        Connect to settings.rpc_url and verify the chain ID.

        Raises:
            RPCError: If RPC URL missing, unreachable, or on the wrong chain
        """
        settings = settings or get_settings()
        if not settings.rpc_url:
            raise RPCError("rpc_url is not configured (set CTF_RPC_URL)")

        web3 = Web3(Web3.HTTPProvider(settings.rpc_url))
        if not web3.is_connected():
            raise RPCError("Web3 provider not connected")

        chain_id = web3.eth.chain_id
        if chain_id != settings.chain_id:
            raise RPCError(
                f"Wrong network: expected chain {settings.chain_id}, got {chain_id}",
                {"expected_chain_id": settings.chain_id, "chain_id": chain_id}
            )

        return cls(web3, private_key, settings=settings, metrics=metrics)

    def __repr__(self) -> str:
        return f"Web3TransactionSubmitter(address={self.address}, ctf={self.ctf.address})"

    @property
    def address(self) -> str:
        """Sender address."""
        return self._account.address

    def _validate_gas_price(self, gas_price_gwei: int, context: Dict[str, Any]) -> None:
        """
        Validate gas price is within safe limits.

        Raises:
            GasPriceTooHighError: If gas price exceeds maximum
        """
        if gas_price_gwei > self.settings.max_gas_price_gwei:
            raise GasPriceTooHighError(
                f"Gas price {gas_price_gwei} gwei exceeds maximum "
                f"{self.settings.max_gas_price_gwei} gwei",
                {**context, "gas_price_gwei": gas_price_gwei}
            )

        if gas_price_gwei > self.settings.warn_gas_price_gwei:
            logger.warning(
                f"High gas price: {gas_price_gwei} gwei "
                f"(above warning threshold of {self.settings.warn_gas_price_gwei} gwei)"
            )

    def _get_next_nonce(self) -> int:
        """Get next nonce with thread-safe caching."""
        with self._nonce_lock:
            cached = self._nonce_cache.get(self.address)

            # Refresh if cache is stale
            if cached and time.time() - cached[1] < self.settings.nonce_cache_ttl:
                nonce = cached[0] + 1
            else:
                nonce = self.web3.eth.get_transaction_count(self.address, "pending")

            self._nonce_cache[self.address] = (nonce, time.time())
            return nonce

    def _invalidate_nonce(self) -> None:
        with self._nonce_lock:
            self._nonce_cache.pop(self.address, None)

    def _gas_limit(self, operation: PositionOperation) -> int:
        if operation.kind == OperationKind.REDEEM:
            return self.settings.gas_limit_redeem
        return self.settings.gas_limit_split_merge

    def _track(self, operation: PositionOperation, status: str) -> None:
        if self.metrics:
            self.metrics.track_submission(operation.kind.value, status)

    def submit(
        self,
        operation: PositionOperation,
        gas_price_gwei: Optional[int] = None,
    ) -> OperationReceipt:
        """
        Sign, send and wait for one operation.

        Args:
            operation: Validated operation from build_split/merge/redeem
            gas_price_gwei: Gas price override (default: settings.gas_price_gwei)

        Returns:
            OperationReceipt with transaction hash and block number

        Raises:
            GasPriceTooHighError: If gas price exceeds settings.max_gas_price_gwei
            RPCError: If building or sending the transaction fails
            TransactionRevertedError: If the transaction reverted
            ReceiptTimeoutError: If no receipt arrived within settings.receipt_timeout
        """
        context = operation.context()
        gas_price_gwei = gas_price_gwei or self.settings.gas_price_gwei
        self._validate_gas_price(gas_price_gwei, context)

        try:
            nonce = self._get_next_nonce()
            tx = getattr(self.ctf.functions, operation.method_name)(
                *operation.call_arguments()
            ).build_transaction({
                'from': self.address,
                'nonce': nonce,
                'gas': self._gas_limit(operation),
                'gasPrice': Web3.to_wei(gas_price_gwei, 'gwei'),
                'chainId': self.settings.chain_id,
            })
        except Exception as e:
            self._invalidate_nonce()
            self._track(operation, "error")
            raise RPCError(
                f"Failed to build {operation.method_name} transaction: {type(e).__name__}: {e}",
                context
            ) from e

        try:
            signed_tx = self.web3.eth.account.sign_transaction(tx, private_key=self._private_key)
        except Exception as e:
            self._invalidate_nonce()
            self._track(operation, "error")
            # Signing errors may echo key material
            raise SubmissionError(
                f"Failed to sign {operation.method_name} transaction: {type(e).__name__}",
                context
            ) from None

        # Handle both web3.py v6 and v7
        raw_tx = getattr(signed_tx, 'raw_transaction', None) or getattr(signed_tx, 'rawTransaction')

        events.info(
            "operation_sending",
            f"Sending {operation.method_name}",
            nonce=nonce,
            gas_price_gwei=gas_price_gwei,
            **context
        )

        started = time.time()
        try:
            tx_hash = self.web3.eth.send_raw_transaction(raw_tx)
        except Exception as e:
            self._invalidate_nonce()
            self._track(operation, "error")
            raise RPCError(
                f"Failed to send {operation.method_name} transaction: {type(e).__name__}: {e}",
                context
            ) from e

        receipt = self._wait_for_receipt(tx_hash, tx, operation, context)

        if self.metrics:
            self.metrics.track_submission_latency(operation.kind.value, time.time() - started)
        self._track(operation, "confirmed")

        events.info(
            "operation_confirmed",
            f"{operation.method_name} confirmed",
            transaction_hash=receipt.transaction_hash,
            block_number=receipt.block_number,
            gas_used=receipt.gas_used,
            **context
        )
        return receipt

    def _wait_for_receipt(
        self,
        tx_hash: bytes,
        tx: Dict[str, Any],
        operation: PositionOperation,
        context: Dict[str, Any],
    ) -> OperationReceipt:
        """
        Wait for the receipt; polling is retried, the send is not.

        Raises:
            ReceiptTimeoutError: If transaction times out
            TransactionRevertedError: If transaction failed on-chain
        """
        tx_hex = Web3.to_hex(tx_hash)

        try:
            receipt = self.retry.execute(
                self.web3.eth.wait_for_transaction_receipt,
                tx_hash,
                timeout=self.settings.receipt_timeout,
                poll_latency=self.settings.receipt_poll_interval,
            )
        except TimeExhausted:
            self._track(operation, "timeout")
            logger.error(
                f"{operation.method_name} timeout: {tx_hex}. "
                f"Check status at https://polygonscan.com/tx/{tx_hex}"
            )
            raise ReceiptTimeoutError(
                f"Transaction {tx_hex} not confirmed within {self.settings.receipt_timeout}s",
                transaction_hash=tx_hex,
                details=context
            ) from None
        except Exception as e:
            self._track(operation, "error")
            raise RPCError(
                f"Failed to fetch receipt for {tx_hex}: {type(e).__name__}: {e}",
                {**context, "transaction_hash": tx_hex}
            ) from e

        block_number = receipt['blockNumber']

        if receipt['status'] != 1:
            self._track(operation, "reverted")
            reason = self._revert_reason(tx, block_number)
            raise TransactionRevertedError(
                f"{operation.method_name} reverted: {tx_hex} "
                f"(block {block_number}, gas {receipt['gasUsed']}): {reason}",
                transaction_hash=tx_hex,
                block_number=block_number,
                reason=reason,
                details=context
            )

        return OperationReceipt(
            transaction_hash=tx_hex,
            block_number=block_number,
            gas_used=receipt.get('gasUsed'),
        )

    def _revert_reason(self, tx: Dict[str, Any], block_number: int) -> str:
        """Replay the call at the mined block to recover the revert reason."""
        try:
            self.web3.eth.call({
                'from': tx.get('from'),
                'to': tx.get('to'),
                'data': tx.get('data'),
            }, block_number)
        except Exception as e:
            return str(e)
        return "Unknown error"
