"""
Core value types: networks, outpoints, satpoints and inscription ids.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum

TXID_HEX_LENGTH = 64
MAX_U32 = 0xFFFFFFFF


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    SIGNET = "signet"
    REGTEST = "regtest"


class InscriptionIdError(ValueError):
    """Raised when an inscription id cannot be parsed."""

    pass


class OutPointError(ValueError):
    """Raised when an outpoint or satpoint cannot be parsed."""

    pass


def is_txid(value: str) -> bool:
    return len(value) == TXID_HEX_LENGTH and all(c in string.hexdigits for c in value)


def _parse_u32(value: str, what: str, error: type[ValueError]) -> int:
    if not (value.isascii() and value.isdigit()):
        raise error(f"invalid {what} '{value}'")
    number = int(value)
    if number > MAX_U32:
        raise error(f"{what} {number} out of range")
    return number


@dataclass(frozen=True, order=True)
class OutPoint:
    """A transaction output reference (txid:vout)."""

    txid: str
    vout: int

    @classmethod
    def parse(cls, value: str) -> OutPoint:
        txid, sep, vout = value.partition(":")
        if not sep:
            raise OutPointError(f"missing ':' in outpoint '{value}'")
        if not is_txid(txid):
            raise OutPointError(f"invalid txid '{txid}'")
        return cls(txid.lower(), _parse_u32(vout, "vout", OutPointError))

    def __str__(self) -> str:
        return f"{self.txid}:{self.vout}"


@dataclass(frozen=True, order=True)
class SatPoint:
    """Position of a sat inside an output: the outpoint plus an offset into its value."""

    outpoint: OutPoint
    offset: int

    @classmethod
    def parse(cls, value: str) -> SatPoint:
        outpoint, sep, offset = value.rpartition(":")
        if not sep or not outpoint:
            raise OutPointError(f"missing offset in satpoint '{value}'")
        if not (offset.isascii() and offset.isdigit()):
            raise OutPointError(f"invalid offset '{offset}'")
        return cls(OutPoint.parse(outpoint), int(offset))

    def __str__(self) -> str:
        return f"{self.outpoint}:{self.offset}"


@dataclass(frozen=True, order=True)
class InscriptionId:
    """Inscription identifier: reveal transaction id and inscription index, `<txid>i<index>`."""

    txid: str
    index: int

    @classmethod
    def parse(cls, value: str) -> InscriptionId:
        if len(value) < TXID_HEX_LENGTH + 2:
            raise InscriptionIdError(f"invalid length {len(value)}")

        separator = value[TXID_HEX_LENGTH]
        if separator != "i":
            raise InscriptionIdError(f"invalid separator '{separator}'")

        txid = value[:TXID_HEX_LENGTH]
        if not is_txid(txid):
            raise InscriptionIdError(f"invalid txid '{txid}'")

        index = _parse_u32(value[TXID_HEX_LENGTH + 1 :], "index", InscriptionIdError)
        return cls(txid.lower(), index)

    def __str__(self) -> str:
        return f"{self.txid}i{self.index}"
