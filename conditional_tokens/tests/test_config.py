"""Tests for settings, logging configuration and metrics."""

from unittest.mock import patch

import pydantic
import pytest
from prometheus_client import CollectorRegistry

from ..config import CTFSettings
from ..ctf.addresses import CTF_ADDRESS, UMA_CTF_ADAPTER, USDC_ADDRESS, get_contract_address
from ..logging_config import LOGGER_NAME, build_logging_config, get_logger, setup_logging
from ..metrics import Metrics


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CTF_RPC_URL", raising=False)
        settings = CTFSettings(_env_file=None)

        assert settings.chain_id == 137
        assert settings.ctf_address == CTF_ADDRESS
        assert settings.collateral_address == USDC_ADDRESS
        assert settings.rpc_url is None
        assert settings.max_gas_price_gwei > settings.warn_gas_price_gwei

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CTF_RPC_URL", "http://localhost:8545")
        monkeypatch.setenv("CTF_GAS_PRICE_GWEI", "75")
        monkeypatch.setenv("CTF_ENABLE_METRICS", "true")

        settings = CTFSettings(_env_file=None)

        assert settings.rpc_url == "http://localhost:8545"
        assert settings.gas_price_gwei == 75
        assert settings.enable_metrics is True

    def test_bounds(self):
        with pytest.raises(pydantic.ValidationError):
            CTFSettings(_env_file=None, max_retries=50)

        with pytest.raises(pydantic.ValidationError):
            CTFSettings(_env_file=None, metrics_port=80)


class TestAddresses:
    """Polygon contract addresses."""

    def test_lookup(self):
        assert get_contract_address("ctf") == CTF_ADDRESS
        assert get_contract_address("usdc") == USDC_ADDRESS
        assert get_contract_address("uma_ctf_adapter") == UMA_CTF_ADAPTER

    def test_unknown(self):
        with pytest.raises(KeyError):
            get_contract_address("nope")


class TestLoggingConfig:
    """dictConfig construction."""

    def test_default_config(self):
        config = build_logging_config()

        assert config["loggers"][LOGGER_NAME]["level"] == "INFO"
        assert config["handlers"]["console"]["filters"] == ["redact"]
        assert "file" not in config["handlers"]

    def test_json_and_file(self, tmp_path):
        config = build_logging_config("debug", str(tmp_path / "ctf.log"), json_format=True)

        assert config["loggers"][LOGGER_NAME]["level"] == "DEBUG"
        assert config["loggers"][LOGGER_NAME]["handlers"] == ["console", "file"]
        assert all(h["formatter"] == "json" for h in config["handlers"].values())

    def test_default_not_mutated(self):
        build_logging_config("ERROR", json_format=True)
        assert build_logging_config()["handlers"]["console"]["formatter"] == "standard"

    def test_setup_logging(self):
        with patch("logging.config.dictConfig") as dict_config:
            setup_logging("WARNING", json_format=True)

        config = dict_config.call_args[0][0]
        assert config["loggers"][LOGGER_NAME]["level"] == "WARNING"
        assert config["handlers"]["console"]["formatter"] == "json"

    def test_get_logger_namespace(self):
        assert get_logger("ctf").name == f"{LOGGER_NAME}.ctf"


class TestMetrics:
    """Prometheus metrics."""

    def test_counters(self):
        registry = CollectorRegistry()
        metrics = Metrics(registry=registry)

        metrics.track_operation_built("split")
        metrics.track_operation_built("split")
        metrics.track_submission("split", "reverted")
        metrics.track_submission_latency("split", 2.5)

        assert registry.get_sample_value("ctf_operations_built_total", {"kind": "split"}) == 2.0
        assert registry.get_sample_value(
            "ctf_submissions_total", {"kind": "split", "status": "reverted"}
        ) == 1.0
        assert registry.get_sample_value(
            "ctf_submission_latency_seconds_sum", {"kind": "split"}
        ) == 2.5

    def test_disabled(self):
        metrics = Metrics(enabled=False)

        metrics.track_operation_built("merge")
        metrics.track_submission("merge", "confirmed")

        assert not hasattr(metrics, "operations_built")
