"""
Transaction model and consensus serialization.

Handles both legacy and segwit (BIP144) encodings, weight and virtual size
(BIP141) and txid computation.
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field

from ordcore.constants import (
    LOCKTIME_ZERO,
    SEQUENCE_FINAL,
    TX_VERSION,
    WITNESS_SCALE_FACTOR,
)
from ordcore.models import OutPoint


class TransactionParseError(ValueError):
    pass


@dataclass
class TxIn:
    """Transaction input."""

    previous_output: OutPoint
    script_sig: bytes = b""
    sequence: int = SEQUENCE_FINAL
    witness: list[bytes] = field(default_factory=list)


@dataclass
class TxOut:
    """Transaction output."""

    script_pubkey: bytes
    value: int


@dataclass
class Transaction:
    inputs: list[TxIn]
    outputs: list[TxOut]
    version: int = TX_VERSION
    lock_time: int = LOCKTIME_ZERO

    def has_witness(self) -> bool:
        return any(inp.witness for inp in self.inputs)

    def serialize(self, include_witness: bool = True) -> bytes:
        """Serialize to bytes; the segwit marker is only written when a witness exists."""
        segwit = include_witness and self.has_witness()

        result = struct.pack("<i", self.version)
        if segwit:
            result += bytes([0x00, 0x01])

        result += encode_varint(len(self.inputs))
        for inp in self.inputs:
            result += serialize_input(inp)

        result += encode_varint(len(self.outputs))
        for out in self.outputs:
            result += serialize_output(out)

        if segwit:
            for inp in self.inputs:
                result += encode_varint(len(inp.witness))
                for item in inp.witness:
                    result += encode_varint(len(item))
                    result += item

        result += struct.pack("<I", self.lock_time)
        return result

    def to_hex(self) -> str:
        return self.serialize().hex()

    def base_size(self) -> int:
        return len(self.serialize(include_witness=False))

    def total_size(self) -> int:
        return len(self.serialize(include_witness=True))

    def weight(self) -> int:
        return self.base_size() * (WITNESS_SCALE_FACTOR - 1) + self.total_size()

    def vsize(self) -> int:
        """Virtual size: weight / 4, rounded up."""
        return (self.weight() + WITNESS_SCALE_FACTOR - 1) // WITNESS_SCALE_FACTOR

    def txid(self) -> str:
        """Calculate txid (double SHA256 of non-witness data)."""
        return hash256(self.serialize(include_witness=False))[::-1].hex()

    def input_outpoints(self) -> list[OutPoint]:
        return [inp.previous_output for inp in self.inputs]

    def output_value(self) -> int:
        return sum(out.value for out in self.outputs)


def hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def encode_varint(n: int) -> bytes:
    """Encode integer as Bitcoin varint."""
    if n < 0xFD:
        return bytes([n])
    elif n <= 0xFFFF:
        return bytes([0xFD]) + struct.pack("<H", n)
    elif n <= 0xFFFFFFFF:
        return bytes([0xFE]) + struct.pack("<I", n)
    else:
        return bytes([0xFF]) + struct.pack("<Q", n)


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Read varint and return (value, new offset)."""
    first = data[offset]
    offset += 1

    if first < 0xFD:
        return first, offset
    if first == 0xFD:
        return struct.unpack("<H", data[offset : offset + 2])[0], offset + 2
    if first == 0xFE:
        return struct.unpack("<I", data[offset : offset + 4])[0], offset + 4
    return struct.unpack("<Q", data[offset : offset + 8])[0], offset + 8


def serialize_outpoint(outpoint: OutPoint) -> bytes:
    """Serialize outpoint (txid:vout)."""
    # txid is in display format (big-endian), need to reverse for raw tx
    return bytes.fromhex(outpoint.txid)[::-1] + struct.pack("<I", outpoint.vout)


def serialize_input(inp: TxIn) -> bytes:
    result = serialize_outpoint(inp.previous_output)
    result += encode_varint(len(inp.script_sig))
    result += inp.script_sig
    result += struct.pack("<I", inp.sequence)
    return result


def serialize_output(out: TxOut) -> bytes:
    result = struct.pack("<Q", out.value)
    result += encode_varint(len(out.script_pubkey))
    result += out.script_pubkey
    return result


def deserialize_transaction(tx_bytes: bytes) -> Transaction:
    """Parse a transaction from consensus bytes (legacy or segwit)."""
    try:
        offset = 0
        version = struct.unpack("<i", tx_bytes[offset : offset + 4])[0]
        offset += 4

        segwit = False
        if tx_bytes[offset] == 0x00 and tx_bytes[offset + 1] == 0x01:
            segwit = True
            offset += 2

        input_count, offset = read_varint(tx_bytes, offset)
        inputs: list[TxIn] = []
        for _ in range(input_count):
            txid = tx_bytes[offset : offset + 32][::-1].hex()
            offset += 32
            vout = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
            offset += 4
            script_len, offset = read_varint(tx_bytes, offset)
            script_sig = tx_bytes[offset : offset + script_len]
            offset += script_len
            sequence = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
            offset += 4
            inputs.append(TxIn(OutPoint(txid, vout), script_sig, sequence))

        output_count, offset = read_varint(tx_bytes, offset)
        outputs: list[TxOut] = []
        for _ in range(output_count):
            value = struct.unpack("<Q", tx_bytes[offset : offset + 8])[0]
            offset += 8
            script_len, offset = read_varint(tx_bytes, offset)
            script_pubkey = tx_bytes[offset : offset + script_len]
            offset += script_len
            outputs.append(TxOut(script_pubkey, value))

        if segwit:
            for inp in inputs:
                item_count, offset = read_varint(tx_bytes, offset)
                for _ in range(item_count):
                    item_len, offset = read_varint(tx_bytes, offset)
                    inp.witness.append(tx_bytes[offset : offset + item_len])
                    offset += item_len

        lock_time = struct.unpack("<I", tx_bytes[offset : offset + 4])[0]
        offset += 4

    except (IndexError, struct.error) as e:
        raise TransactionParseError(f"Failed to parse transaction: {e}") from e

    if offset != len(tx_bytes):
        raise TransactionParseError(
            f"Failed to parse transaction: {len(tx_bytes) - offset} trailing bytes"
        )

    return Transaction(inputs=inputs, outputs=outputs, version=version, lock_time=lock_time)
