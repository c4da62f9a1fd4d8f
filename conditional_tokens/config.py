"""
Configuration management for the Conditional Tokens client.

Loads settings from environment variables with validation.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .ctf.addresses import (
    CHAIN_ID,
    CTF_ADDRESS,
    USDC_ADDRESS,
)


class CTFSettings(BaseSettings):
    """
    Conditional Tokens client settings.

    Loads from environment variables with CTF_ prefix.
    """
    model_config = SettingsConfigDict(
        env_prefix="CTF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Chain configuration
    rpc_url: Optional[str] = Field(None, description="Polygon RPC URL")
    chain_id: int = Field(default=CHAIN_ID, description="Polygon chain ID")

    # Contracts
    ctf_address: str = Field(default=CTF_ADDRESS, description="ConditionalTokens contract")
    collateral_address: str = Field(default=USDC_ADDRESS, description="Default collateral token")

    # Gas
    gas_limit_split_merge: int = Field(default=300_000, ge=21_000,
                                       description="Gas limit for split/merge")
    gas_limit_redeem: int = Field(default=300_000, ge=21_000,
                                  description="Gas limit for redeem")
    gas_price_gwei: int = Field(default=50, ge=1, description="Default gas price (gwei)")
    max_gas_price_gwei: int = Field(default=500, ge=1,
                                    description="Refuse to submit above this gas price")
    warn_gas_price_gwei: int = Field(default=100, ge=1,
                                     description="Log a warning above this gas price")

    # Receipts
    receipt_timeout: float = Field(default=120.0, ge=1.0,
                                   description="Seconds to wait for a receipt")
    receipt_poll_interval: float = Field(default=0.5, gt=0.0,
                                         description="Receipt polling interval (seconds)")
    nonce_cache_ttl: float = Field(default=30.0, ge=0.0,
                                   description="Seconds a cached nonce stays valid")

    # Retries for read-only RPC calls (transactions are never re-sent)
    max_retries: int = Field(default=3, ge=0, le=10, description="Max retry attempts")
    retry_base_delay: float = Field(default=1.0, ge=0.0, description="Initial backoff delay")
    retry_max_delay: float = Field(default=30.0, ge=0.0, description="Max backoff delay")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Emit JSON logs")

    # Metrics
    enable_metrics: bool = Field(default=False, description="Enable Prometheus metrics")
    metrics_port: Optional[int] = Field(default=None, ge=1024, le=65535,
                                        description="Metrics server port (None = no server)")

    def __repr__(self) -> str:
        """Safe repr without RPC credentials."""
        return (
            f"CTFSettings("
            f"chain_id={self.chain_id}, "
            f"ctf_address={self.ctf_address}, "
            f"rpc_configured={self.rpc_url is not None}"
            ")"
        )


def get_settings() -> CTFSettings:
    """
    Get Conditional Tokens settings.

    Returns:
        Validated settings instance
    """
    return CTFSettings()
