"""
Shared fixtures for ord-sendmany tests.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from ordcore.address import Destination, encode_segwit_address, parse_address
from ordcore.models import InscriptionId, NetworkType, OutPoint, SatPoint
from ordwallet.models import WalletState


def fake_txid(n: int) -> str:
    return f"{n:064x}"


@pytest.fixture
def outpoint() -> Callable[..., OutPoint]:
    """Factory for distinct outpoints: outpoint(1), outpoint(1, vout=2)."""

    def make(n: int, vout: int = 0) -> OutPoint:
        return OutPoint(fake_txid(n), vout)

    return make


@pytest.fixture
def inscription() -> Callable[..., InscriptionId]:
    """Factory for distinct inscription ids, in a txid range apart from outpoints."""

    def make(n: int, index: int = 0) -> InscriptionId:
        return InscriptionId(fake_txid(0xA000 + n), index)

    return make


@pytest.fixture
def p2wpkh() -> Callable[[int], Destination]:
    """Factory for mainnet P2WPKH destinations (dust limit 294)."""

    def make(n: int) -> Destination:
        address = encode_segwit_address("bc", 0, bytes([n]) * 20)
        return parse_address(address, NetworkType.MAINNET)

    return make


@pytest.fixture
def p2tr() -> Callable[[int], Destination]:
    """Factory for mainnet P2TR destinations (dust limit 330)."""

    def make(n: int) -> Destination:
        address = encode_segwit_address("bc", 1, bytes([n]) * 32)
        return parse_address(address, NetworkType.MAINNET)

    return make


@pytest.fixture
def wallet_state() -> Callable[..., WalletState]:
    """
    Build a WalletState from outputs and inscription placements.

    wallet_state({op: value}, {inscription_id: (op, offset)}, locked={op})
    """

    def make(
        outputs: dict[OutPoint, int],
        placements: dict[InscriptionId, tuple[OutPoint, int]] | None = None,
        locked: set[OutPoint] | None = None,
    ) -> WalletState:
        inscriptions = {
            inscription_id: SatPoint(op, offset)
            for inscription_id, (op, offset) in (placements or {}).items()
        }
        return WalletState(
            unspent_outputs=outputs,
            locked_outputs=frozenset(locked or ()),
            inscriptions=inscriptions,
        )

    return make
