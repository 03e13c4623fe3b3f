"""
Tests for address parsing, bech32/bech32m and dust thresholds.
"""

from __future__ import annotations

import pytest
from ordcore.address import (
    AddressError,
    AddressNetworkError,
    decode_segwit_address,
    dust_threshold,
    encode_segwit_address,
    parse_address,
    script_to_address,
)
from ordcore.models import NetworkType

P2WPKH_MAINNET = "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4"
P2WPKH_TESTNET = "tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx"
P2WPKH_REGTEST = "bcrt1qw508d6qejxtdg4y5r3zarvary0c5xw7kygt080"
P2WSH_MAINNET = "bc1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3qccfmv3"
P2TR_MAINNET = "bc1p0xlxvlhemja6c4dqv22uapctqupfhlxm9h8z3k2e72q4k9hcz7vqzk5jj0"
P2TR_TESTNET = "tb1pqqqqp399et2xygdj5xreqhjjvcmzhxw4aywxecjdzew6hylgvsesf3hn0c"
P2PKH_MAINNET = "1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2"
P2SH_MAINNET = "3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy"

# Witness v1 program carrying a bech32 (not bech32m) checksum
P2TR_WRONG_CHECKSUM = "bc1p0xlxvlhemja6c4dqv22uapctqupfhlxm9h8z3k2e72q4k9hcz7vqh2y7hd"

WITNESS_PROGRAM = bytes.fromhex("751e76e8199196d454941c45d1b3a323f1433bd6")
TAPROOT_KEY = bytes.fromhex("79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798")


class TestSegwitAddresses:
    def test_p2wpkh_mainnet(self) -> None:
        destination = parse_address(P2WPKH_MAINNET, NetworkType.MAINNET)
        assert destination.script_pubkey == bytes([0x00, 0x14]) + WITNESS_PROGRAM
        assert destination.network == NetworkType.MAINNET
        assert str(destination) == P2WPKH_MAINNET

    def test_p2wpkh_uppercase(self) -> None:
        destination = parse_address(P2WPKH_MAINNET.upper(), NetworkType.MAINNET)
        assert destination.script_pubkey == bytes([0x00, 0x14]) + WITNESS_PROGRAM

    def test_p2wpkh_testnet_and_regtest(self) -> None:
        testnet = parse_address(P2WPKH_TESTNET, NetworkType.TESTNET)
        signet = parse_address(P2WPKH_TESTNET, NetworkType.SIGNET)
        regtest = parse_address(P2WPKH_REGTEST, NetworkType.REGTEST)
        assert testnet.script_pubkey == signet.script_pubkey == regtest.script_pubkey

    def test_p2wsh(self) -> None:
        destination = parse_address(P2WSH_MAINNET, NetworkType.MAINNET)
        assert destination.script_pubkey[:2] == bytes([0x00, 0x20])
        assert len(destination.script_pubkey) == 34

    def test_p2tr(self) -> None:
        destination = parse_address(P2TR_MAINNET, NetworkType.MAINNET)
        assert destination.script_pubkey == bytes([0x51, 0x20]) + TAPROOT_KEY

    def test_p2tr_testnet(self) -> None:
        destination = parse_address(P2TR_TESTNET, NetworkType.TESTNET)
        assert destination.script_pubkey[:2] == bytes([0x51, 0x20])

    def test_v1_with_bech32_checksum_rejected(self) -> None:
        with pytest.raises(AddressError, match="bech32m"):
            parse_address(P2TR_WRONG_CHECKSUM, NetworkType.MAINNET)

    def test_bad_checksum(self) -> None:
        corrupted = P2WPKH_MAINNET[:-1] + ("5" if P2WPKH_MAINNET[-1] != "5" else "6")
        with pytest.raises(AddressError, match="checksum"):
            parse_address(corrupted, NetworkType.MAINNET)

    def test_mixed_case_rejected(self) -> None:
        with pytest.raises(AddressError, match="mixed case"):
            parse_address("bc1Qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4", NetworkType.MAINNET)

    def test_encode_roundtrip(self) -> None:
        assert encode_segwit_address("bc", 0, WITNESS_PROGRAM) == P2WPKH_MAINNET
        assert encode_segwit_address("bc", 1, TAPROOT_KEY) == P2TR_MAINNET
        assert decode_segwit_address(P2TR_MAINNET) == ("bc", 1, TAPROOT_KEY)


class TestBase58Addresses:
    def test_p2pkh(self) -> None:
        destination = parse_address(P2PKH_MAINNET, NetworkType.MAINNET)
        script = destination.script_pubkey
        assert len(script) == 25
        assert script[:3] == bytes([0x76, 0xA9, 0x14])
        assert script[-2:] == bytes([0x88, 0xAC])

    def test_p2sh(self) -> None:
        destination = parse_address(P2SH_MAINNET, NetworkType.MAINNET)
        script = destination.script_pubkey
        assert len(script) == 23
        assert script[:2] == bytes([0xA9, 0x14])
        assert script[-1] == 0x87

    def test_bad_base58_checksum(self) -> None:
        with pytest.raises(AddressError):
            parse_address(P2PKH_MAINNET[:-1] + "3", NetworkType.MAINNET)

    def test_garbage(self) -> None:
        with pytest.raises(AddressError):
            parse_address("not-an-address", NetworkType.MAINNET)

    def test_empty(self) -> None:
        with pytest.raises(AddressError, match="empty"):
            parse_address("  ", NetworkType.MAINNET)


class TestNetworkMismatch:
    @pytest.mark.parametrize(
        "address,network",
        [
            (P2WPKH_MAINNET, NetworkType.TESTNET),
            (P2WPKH_TESTNET, NetworkType.MAINNET),
            (P2WPKH_REGTEST, NetworkType.TESTNET),
            (P2TR_MAINNET, NetworkType.REGTEST),
            (P2PKH_MAINNET, NetworkType.TESTNET),
            (P2SH_MAINNET, NetworkType.SIGNET),
        ],
    )
    def test_wrong_network(self, address: str, network: NetworkType) -> None:
        with pytest.raises(AddressNetworkError, match=f"not {network.value}"):
            parse_address(address, network)

    def test_network_error_is_address_error(self) -> None:
        assert issubclass(AddressNetworkError, AddressError)


class TestDustThreshold:
    @pytest.mark.parametrize(
        "address,expected",
        [
            (P2PKH_MAINNET, 546),
            (P2SH_MAINNET, 540),
            (P2WPKH_MAINNET, 294),
            (P2WSH_MAINNET, 330),
            (P2TR_MAINNET, 330),
        ],
    )
    def test_standard_scripts(self, address: str, expected: int) -> None:
        destination = parse_address(address, NetworkType.MAINNET)
        assert destination.dust_threshold == expected

    def test_op_return_is_never_dust(self) -> None:
        assert dust_threshold(bytes([0x6A, 0x04]) + b"test") == 0


class TestScriptToAddress:
    @pytest.mark.parametrize(
        "address", [P2WPKH_MAINNET, P2WSH_MAINNET, P2TR_MAINNET, P2PKH_MAINNET, P2SH_MAINNET]
    )
    def test_renders_standard_scripts(self, address: str) -> None:
        script = parse_address(address, NetworkType.MAINNET).script_pubkey
        assert script_to_address(script, NetworkType.MAINNET) == address

    def test_nonstandard(self) -> None:
        assert script_to_address(bytes([0x6A]), NetworkType.MAINNET) is None
