"""
Tests for settings and per-run configuration.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest
from ordcore.models import NetworkType
from ordwallet.config import WalletSettings
from pydantic import ValidationError
from sendmany.config import SendManyConfig, SendManySettings
from sendmany.fees import FeeRate


class TestWalletSettings:
    """Tests for WalletSettings."""

    def test_defaults(self) -> None:
        """Test default connection settings."""
        settings = WalletSettings()
        assert settings.network == NetworkType.MAINNET
        assert settings.rpc_wallet == "ord"
        assert settings.rest_retry_count == 3
        assert settings.rest_retry_base_delay == 1.0

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ORD_WALLET_ environment variables are read."""
        monkeypatch.setenv("ORD_WALLET_NETWORK", "regtest")
        monkeypatch.setenv("ORD_WALLET_ORD_URL", "http://ord:8080")
        settings = WalletSettings()
        assert settings.network == NetworkType.REGTEST
        assert settings.ord_url == "http://ord:8080"

    def test_retry_count_bounds(self) -> None:
        """Test REST retry count validation."""
        with pytest.raises(ValidationError):
            WalletSettings(rest_retry_count=0)
        with pytest.raises(ValidationError):
            WalletSettings(rest_retry_count=11)


class TestSendManySettings:
    """Tests for SendManySettings."""

    def test_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ORD_SENDMANY_ variables, including a default fee rate."""
        monkeypatch.setenv("ORD_SENDMANY_NETWORK", "signet")
        monkeypatch.setenv("ORD_SENDMANY_FEE_RATE", "2.5")
        settings = SendManySettings()
        assert settings.network == NetworkType.SIGNET
        assert settings.fee_rate == Decimal("2.5")

    def test_no_default_fee_rate(self) -> None:
        """Test fee rate is unset unless configured."""
        assert SendManySettings().fee_rate is None

    def test_negative_fee_rate(self) -> None:
        """Test negative fee rates are rejected."""
        with pytest.raises(ValidationError):
            SendManySettings(fee_rate=Decimal("-1"))


class TestSendManyConfig:
    """Tests for SendManyConfig."""

    def test_minimal(self, tmp_path: Path) -> None:
        """Test required fields and defaults."""
        config = SendManyConfig(fee_rate="1.5", csv=tmp_path / "r.csv")
        assert config.rate == FeeRate("1.5")
        assert config.broadcast is False
        assert config.network == NetworkType.MAINNET

    @pytest.mark.parametrize("value", ["-1", "nan", "inf", "fast"])
    def test_invalid_fee_rate(self, tmp_path: Path, value: str) -> None:
        """Test fee rate validation."""
        with pytest.raises(ValidationError):
            SendManyConfig(fee_rate=value, csv=tmp_path / "r.csv")

    def test_fee_rate_required(self, tmp_path: Path) -> None:
        """Test a fee rate must be given."""
        with pytest.raises(ValidationError):
            SendManyConfig(csv=tmp_path / "r.csv")
