"""
Configuration for ord-sendmany.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from ordcore.models import NetworkType
from ordwallet.config import WalletSettings
from pydantic import BaseModel, Field
from pydantic_settings import SettingsConfigDict

from sendmany.fees import FeeRate


class SendManySettings(WalletSettings):
    """Connection settings, read from ORD_SENDMANY_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="ORD_SENDMANY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    fee_rate: Decimal | None = Field(
        default=None, ge=0, allow_inf_nan=False, description="Default fee rate in sat/vB"
    )


class SendManyConfig(BaseModel):
    """Options for one sendmany run."""

    fee_rate: Decimal = Field(..., ge=0, allow_inf_nan=False, description="Fee rate in sat/vB")
    csv: Path = Field(..., description="Request file of `inscriptionid,destination` lines")
    broadcast: bool = Field(
        default=False, description="Broadcast instead of printing the signed transaction"
    )
    network: NetworkType = NetworkType.MAINNET

    @property
    def rate(self) -> FeeRate:
        return FeeRate(self.fee_rate)
