"""
Address parsing, scriptPubKey construction and dust thresholds.

Supports:
- P2PKH (1..., m..., n...)
- P2SH (3..., 2...)
- P2WPKH / P2WSH (bech32, witness v0)
- P2TR and later witness versions (bech32m, BIP350)
"""

from __future__ import annotations

from dataclasses import dataclass

import base58

from ordcore.constants import (
    DUST_RELAY_FEE,
    SPEND_INPUT_BASE_SIZE,
    SPEND_SCRIPT_SIG_SIZE,
    SPEND_WITNESS_SIZE,
)
from ordcore.models import NetworkType
from ordcore.transaction import encode_varint

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
BECH32_CONST = 1
BECH32M_CONST = 0x2BC830A3

OP_0 = 0x00
OP_1 = 0x51
OP_16 = 0x60
OP_RETURN = 0x6A

BECH32_HRP = {
    NetworkType.MAINNET: "bc",
    NetworkType.TESTNET: "tb",
    NetworkType.SIGNET: "tb",
    NetworkType.REGTEST: "bcrt",
}

# (P2PKH version, P2SH version)
BASE58_VERSIONS = {
    NetworkType.MAINNET: (0x00, 0x05),
    NetworkType.TESTNET: (0x6F, 0xC4),
    NetworkType.SIGNET: (0x6F, 0xC4),
    NetworkType.REGTEST: (0x6F, 0xC4),
}


class AddressError(ValueError):
    """Raised for syntactically invalid or unsupported addresses."""

    pass


class AddressNetworkError(AddressError):
    """Raised when a valid address belongs to a different network."""

    pass


@dataclass(frozen=True)
class Destination:
    """An address validated for one network, with its output script."""

    address: str
    script_pubkey: bytes
    network: NetworkType

    @property
    def dust_threshold(self) -> int:
        return dust_threshold(self.script_pubkey)

    def __str__(self) -> str:
        return self.address


def bech32_polymod(values: list[int]) -> int:
    """Bech32 checksum polymod"""
    gen = [0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3]
    chk = 1
    for v in values:
        b = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ v
        for i in range(5):
            chk ^= gen[i] if ((b >> i) & 1) else 0
    return chk


def bech32_hrp_expand(hrp: str) -> list[int]:
    """Expand HRP for bech32"""
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def bech32_create_checksum(hrp: str, data: list[int], const: int) -> list[int]:
    values = bech32_hrp_expand(hrp) + data
    polymod = bech32_polymod(values + [0, 0, 0, 0, 0, 0]) ^ const
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def bech32_encode(hrp: str, data: list[int], const: int = BECH32_CONST) -> str:
    combined = data + bech32_create_checksum(hrp, data, const)
    return hrp + "1" + "".join([BECH32_CHARSET[d] for d in combined])


def bech32_decode(address: str) -> tuple[str, list[int], int]:
    """
    Decode a bech32 or bech32m string.

    Returns:
        (hrp, data without checksum, checksum constant)
    """
    if any(ord(x) < 33 or ord(x) > 126 for x in address):
        raise AddressError("invalid character")
    if address.lower() != address and address.upper() != address:
        raise AddressError("mixed case")
    address = address.lower()

    pos = address.rfind("1")
    if pos < 1 or pos + 7 > len(address) or len(address) > 90:
        raise AddressError("invalid bech32 separator position or length")

    hrp = address[:pos]
    data = [BECH32_CHARSET.find(x) for x in address[pos + 1 :]]
    if -1 in data:
        raise AddressError("invalid bech32 character")

    const = bech32_polymod(bech32_hrp_expand(hrp) + data)
    if const not in (BECH32_CONST, BECH32M_CONST):
        raise AddressError("invalid bech32 checksum")
    return hrp, data[:-6], const


def convertbits(data: bytes | list[int], frombits: int, tobits: int, pad: bool = True) -> list[int]:
    """Convert between bit groups"""
    acc = 0
    bits = 0
    ret = []
    maxv = (1 << tobits) - 1
    max_acc = (1 << (frombits + tobits - 1)) - 1

    for value in data:
        acc = ((acc << frombits) | value) & max_acc
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            ret.append((acc >> bits) & maxv)

    if pad:
        if bits:
            ret.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or ((acc << (tobits - bits)) & maxv):
        raise AddressError("invalid padding in witness program")

    return ret


def encode_segwit_address(hrp: str, witver: int, program: bytes) -> str:
    """Encode a witness program; bech32 for v0, bech32m for v1+."""
    const = BECH32_CONST if witver == 0 else BECH32M_CONST
    return bech32_encode(hrp, [witver] + convertbits(program, 8, 5), const)


def decode_segwit_address(address: str) -> tuple[str, int, bytes]:
    """
    Decode a segwit address.

    Returns:
        (hrp, witness version, witness program)
    """
    hrp, data, const = bech32_decode(address)
    if not data:
        raise AddressError("empty witness data")

    witver = data[0]
    if witver > 16:
        raise AddressError(f"invalid witness version {witver}")

    program = bytes(convertbits(data[1:], 5, 8, pad=False))
    if len(program) < 2 or len(program) > 40:
        raise AddressError(f"invalid witness program length {len(program)}")
    if witver == 0 and len(program) not in (20, 32):
        raise AddressError(f"invalid v0 witness program length {len(program)}")

    if witver == 0 and const != BECH32_CONST:
        raise AddressError("witness v0 address must use bech32 checksum")
    if witver != 0 and const != BECH32M_CONST:
        raise AddressError(f"witness v{witver} address must use bech32m checksum")

    return hrp, witver, program


def witness_scriptpubkey(witver: int, program: bytes) -> bytes:
    version_op = OP_0 if witver == 0 else OP_1 + witver - 1
    return bytes([version_op, len(program)]) + program


def _network_names(match: object, table: dict[NetworkType, object]) -> str:
    return "/".join(n.value for n, v in table.items() if v == match)


def _looks_like_bech32(address: str) -> bool:
    lowered = address.lower()
    return any(lowered.startswith(hrp + "1") for hrp in set(BECH32_HRP.values()))


def parse_address(address: str, network: NetworkType) -> Destination:
    """
    Parse an address and require that it belongs to `network`.

    Raises:
        AddressNetworkError: valid address for another network
        AddressError: anything else wrong with the address
    """
    address = address.strip()
    if not address:
        raise AddressError("empty address")

    if _looks_like_bech32(address):
        hrp, witver, program = decode_segwit_address(address)
        expected = BECH32_HRP[network]
        if hrp != expected:
            raise AddressNetworkError(
                f"address {address} is for {_network_names(hrp, BECH32_HRP)}, not {network.value}"
            )
        return Destination(address, witness_scriptpubkey(witver, program), network)

    try:
        decoded = base58.b58decode_check(address)
    except ValueError as e:
        raise AddressError(f"invalid base58 address: {e}") from e

    if len(decoded) != 21:
        raise AddressError(f"invalid base58 payload length {len(decoded)}")

    version = decoded[0]
    payload = decoded[1:]
    p2pkh_version, p2sh_version = BASE58_VERSIONS[network]

    if version == p2pkh_version:
        # OP_DUP OP_HASH160 <20-byte-pubkeyhash> OP_EQUALVERIFY OP_CHECKSIG
        script = bytes([0x76, 0xA9, 0x14]) + payload + bytes([0x88, 0xAC])
        return Destination(address, script, network)
    if version == p2sh_version:
        # OP_HASH160 <20-byte-scripthash> OP_EQUAL
        script = bytes([0xA9, 0x14]) + payload + bytes([0x87])
        return Destination(address, script, network)

    for other, versions in BASE58_VERSIONS.items():
        if version in versions:
            raise AddressNetworkError(
                f"address {address} is for {other.value}, not {network.value}"
            )
    raise AddressError(f"unknown address version {version}")


def is_witness_program(script: bytes) -> bool:
    if len(script) < 4 or len(script) > 42:
        return False
    if script[0] != OP_0 and not (OP_1 <= script[0] <= OP_16):
        return False
    return script[1] + 2 == len(script)


def dust_threshold(script_pubkey: bytes) -> int:
    """
    Minimum non-dust value for an output paying to `script_pubkey`.

    Cost of the output plus the cost of spending it, at DUST_RELAY_FEE.
    """
    if script_pubkey and script_pubkey[0] == OP_RETURN:
        return 0

    size = 8 + len(encode_varint(len(script_pubkey))) + len(script_pubkey)
    if is_witness_program(script_pubkey):
        size += SPEND_INPUT_BASE_SIZE + SPEND_WITNESS_SIZE
    else:
        size += SPEND_INPUT_BASE_SIZE + SPEND_SCRIPT_SIG_SIZE

    return size * DUST_RELAY_FEE // 1000


def script_to_address(script_pubkey: bytes, network: NetworkType) -> str | None:
    """Render a standard output script as an address, or None if non-standard."""
    if is_witness_program(script_pubkey):
        witver = 0 if script_pubkey[0] == OP_0 else script_pubkey[0] - OP_1 + 1
        return encode_segwit_address(BECH32_HRP[network], witver, script_pubkey[2:])

    p2pkh_version, p2sh_version = BASE58_VERSIONS[network]
    if (
        len(script_pubkey) == 25
        and script_pubkey[:3] == bytes([0x76, 0xA9, 0x14])
        and script_pubkey[23:] == bytes([0x88, 0xAC])
    ):
        return base58.b58encode_check(bytes([p2pkh_version]) + script_pubkey[3:23]).decode()
    if (
        len(script_pubkey) == 23
        and script_pubkey[:2] == bytes([0xA9, 0x14])
        and script_pubkey[22] == 0x87
    ):
        return base58.b58encode_check(bytes([p2sh_version]) + script_pubkey[2:22]).decode()

    return None
