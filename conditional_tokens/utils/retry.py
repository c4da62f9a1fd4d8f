"""
Retry logic with exponential backoff.

Only for read-only RPC calls (receipt polling, contract views). Split,
merge and redeem transactions are never re-sent: a resend would repeat
the state change on-chain.
"""

import random
import time
from typing import Callable, Optional, Tuple, Type, TypeVar
import logging

from ..exceptions import CTFError, RPCError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_RETRYABLE: Tuple[Type[BaseException], ...] = (RPCError, ConnectionError, OSError)


class RetryStrategy:
    """
    Configurable retry strategy with exponential backoff.

    Features:
    - Exponential backoff with jitter
    - Configurable retryable exception types
    - Validation errors are never retried
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
        retry_on: Tuple[Type[BaseException], ...] = DEFAULT_RETRYABLE,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize retry strategy.

        Args:
            max_retries: Maximum retry attempts
            base_delay: Initial delay in seconds
            max_delay: Maximum delay in seconds
            exponential_base: Backoff multiplier
            jitter: Add random jitter to delays
            retry_on: Exception types that trigger a retry
            sleep: Sleep function (injectable for tests)
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.retry_on = retry_on
        self._sleep = sleep

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate delay for attempt with exponential backoff + jitter."""
        delay = min(
            self.base_delay * (self.exponential_base ** attempt),
            self.max_delay
        )

        if self.jitter:
            # Add random jitter (±25%)
            jitter_amount = delay * 0.25
            delay += random.uniform(-jitter_amount, jitter_amount)

        return max(0, delay)

    def _should_retry(self, exception: Exception, attempt: int) -> bool:
        """Determine if exception should trigger retry."""
        if attempt >= self.max_retries:
            return False

        # Never retry validation errors
        if isinstance(exception, ValidationError):
            return False

        return isinstance(exception, self.retry_on)

    def execute(self, func: Callable[..., T], *args, **kwargs) -> T:
        """
        Execute function with retry logic.

        Returns:
            Function result

        Raises:
            Last exception if all retries exhausted
        """
        last_exception: Optional[Exception] = None
        name = getattr(func, "__name__", repr(func))

        for attempt in range(self.max_retries + 1):
            try:
                return func(*args, **kwargs)

            except Exception as e:
                last_exception = e

                if not self._should_retry(e, attempt):
                    logger.debug(
                        f"Not retrying {name} after attempt {attempt + 1}: "
                        f"{type(e).__name__}"
                    )
                    raise

                delay = self._calculate_delay(attempt)
                logger.warning(
                    f"Retry {attempt + 1}/{self.max_retries} for {name} "
                    f"after {type(e).__name__}: {e}. "
                    f"Waiting {delay:.2f}s"
                )

                self._sleep(delay)

        if last_exception:
            raise last_exception

        raise CTFError("Retry logic error")

