"""
Structured JSON logging for production environments.

Enables correlation IDs, structured data, and queryable logs.
"""

import json
import logging
import re
import threading
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

# Context-local correlation ID storage
_correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# Secrets registered at runtime (e.g., by the transaction submitter)
_registered_secrets: set = set()
_secrets_lock = threading.Lock()


def register_secret(secret: str) -> None:
    """
    Register a value that must never appear in log output.

    Condition IDs, collection IDs and transaction hashes share the 32-byte
    hex shape of a private key, so keys are redacted by exact value and by
    labelled patterns rather than by shape alone.
    """
    if not secret:
        return
    bare = secret[2:] if secret.startswith("0x") else secret
    with _secrets_lock:
        _registered_secrets.add(bare.lower())


class CredentialRedactionFilter(logging.Filter):
    """
    Security filter that redacts credentials from log messages.

    - Redacts registered private keys wherever they appear
    - Redacts labelled secrets (private_key=..., secret: ..., password=...)
    - Leaves condition IDs, collection IDs and tx hashes readable

    Usage:
        >>> handler = logging.StreamHandler()
        >>> handler.addFilter(CredentialRedactionFilter())
        >>> logger.addHandler(handler)
    """

    LABELLED_SECRET_PATTERN = re.compile(
        r'((?:private_?key|priv_?key|secret|passphrase|password)["\']?\s*[:=]\s*["\']?)'
        r'(?:0x)?[a-zA-Z0-9+/=]{16,}["\']?',
        re.IGNORECASE
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact credentials from log record.

        Returns:
            Always True (record is never filtered out, just sanitized)
        """
        if record.msg:
            record.msg = self._redact_credentials(str(record.msg))

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self._redact_credentials(str(v))
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._redact_credentials(str(arg))
                    for arg in record.args
                )

        if record.exc_text:
            record.exc_text = self._redact_credentials(record.exc_text)

        return True

    def _redact_credentials(self, text: str) -> str:
        """Redact all credential patterns from text."""
        if not text:
            return text

        with _secrets_lock:
            secrets = list(_registered_secrets)

        for secret in secrets:
            text = re.sub(re.escape(secret), "[REDACTED]", text, flags=re.IGNORECASE)

        # Keep the prefix (private_key=) but replace the value
        text = self.LABELLED_SECRET_PATTERN.sub(r'\1[REDACTED]', text)

        return text


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON for easy parsing by log aggregators.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = _correlation_id.get()
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        return json.dumps(log_data, default=str)


class StructuredLogger:
    """
    Structured logger wrapper with correlation ID support.

    Provides structured logging methods with automatic correlation tracking.
    """

    def __init__(self, name: str):
        """Initialize structured logger."""
        self.logger = logging.getLogger(name)

    def _log(
        self,
        level: int,
        event: str,
        message: Optional[str] = None,
        **fields
    ) -> None:
        """Log structured event."""
        log_message = f"{event}: {message}" if message else event

        extra_fields = {"event": event}
        extra_fields.update(fields)

        self.logger.log(level, log_message, extra={'extra_fields': extra_fields})

    def debug(self, event: str, message: Optional[str] = None, **fields) -> None:
        """Log debug event."""
        self._log(logging.DEBUG, event, message, **fields)

    def info(self, event: str, message: Optional[str] = None, **fields) -> None:
        """
        Log info event.

        Example:
            >>> logger.info(
            ...     "operation_confirmed",
            ...     "Split mined",
            ...     transaction_hash="0xabc...",
            ...     block_number=51234567,
            ...     condition_id="0x4854...",
            ... )
        """
        self._log(logging.INFO, event, message, **fields)

    def warning(self, event: str, message: Optional[str] = None, **fields) -> None:
        """Log warning event."""
        self._log(logging.WARNING, event, message, **fields)

    def error(self, event: str, message: Optional[str] = None, **fields) -> None:
        """Log error event."""
        self._log(logging.ERROR, event, message, **fields)


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set correlation ID for current context.

    Args:
        correlation_id: Correlation ID (generates UUID if None)

    Returns:
        The correlation ID set
    """
    if correlation_id is None:
        correlation_id = f"op_{uuid.uuid4().hex[:12]}"

    _correlation_id.set(correlation_id)
    return correlation_id


def get_correlation_id() -> Optional[str]:
    """Get current correlation ID."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear correlation ID from current context."""
    _correlation_id.set(None)


def get_logger(name: str) -> StructuredLogger:
    """
    Get structured logger instance.

    Example:
        >>> logger = get_logger("conditional_tokens.ctf")
        >>> logger.info("operation_built", kind="split", amount=100)
    """
    return StructuredLogger(name)
