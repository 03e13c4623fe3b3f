"""
Configuration management using pydantic-settings.
"""

from __future__ import annotations

from ordcore.models import NetworkType
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WalletSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ORD_WALLET_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    network: NetworkType = NetworkType.MAINNET

    rpc_url: str = "http://127.0.0.1:8332"
    rpc_user: str = "rpcuser"
    rpc_password: str = "rpcpassword"
    rpc_wallet: str = "ord"
    rpc_timeout: float = Field(default=30.0, gt=0)

    ord_url: str = "http://127.0.0.1:80"
    rest_url: str = "http://127.0.0.1:8332"
    rest_retry_count: int = Field(default=3, ge=1, le=10)
    rest_retry_base_delay: float = Field(default=1.0, ge=0)

    log_level: str = "INFO"

