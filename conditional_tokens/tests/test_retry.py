"""Tests for retry strategy."""

from unittest.mock import MagicMock

import pytest

from ..exceptions import RPCError, TransactionRevertedError, ZeroAmountError
from ..utils.retry import RetryStrategy


def make_strategy(**kwargs):
    delays = []
    strategy = RetryStrategy(sleep=delays.append, **kwargs)
    return strategy, delays


def test_success_without_retry():
    strategy, delays = make_strategy()
    func = MagicMock(return_value=42)

    assert strategy.execute(func, 1, key="value") == 42
    func.assert_called_once_with(1, key="value")
    assert delays == []


def test_retries_rpc_errors():
    strategy, delays = make_strategy(max_retries=3, jitter=False)
    func = MagicMock(side_effect=[RPCError("down"), ConnectionError("reset"), "ok"])

    assert strategy.execute(func) == "ok"
    assert func.call_count == 3
    assert delays == [1.0, 2.0]


def test_gives_up_after_max_retries():
    strategy, delays = make_strategy(max_retries=2, jitter=False)
    func = MagicMock(side_effect=RPCError("down"))

    with pytest.raises(RPCError):
        strategy.execute(func)

    assert func.call_count == 3
    assert len(delays) == 2


def test_validation_errors_not_retried():
    strategy, delays = make_strategy(retry_on=(Exception,))
    func = MagicMock(side_effect=ZeroAmountError("amount must be positive", amount=0))

    with pytest.raises(ZeroAmountError):
        strategy.execute(func)

    func.assert_called_once()


def test_non_retryable_submission_error():
    strategy, delays = make_strategy()
    func = MagicMock(side_effect=TransactionRevertedError("reverted"))

    with pytest.raises(TransactionRevertedError):
        strategy.execute(func)

    func.assert_called_once()
    assert delays == []


def test_delay_capped():
    strategy = RetryStrategy(base_delay=10.0, max_delay=15.0, jitter=False)
    assert strategy._calculate_delay(0) == 10.0
    assert strategy._calculate_delay(5) == 15.0


def test_jitter_bounds():
    strategy = RetryStrategy(base_delay=4.0, jitter=True)
    for _ in range(20):
        assert 3.0 <= strategy._calculate_delay(0) <= 5.0
