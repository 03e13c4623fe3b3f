"""
Tests for loading the wallet snapshot and listing wallet inscriptions.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from ordcore.models import InscriptionId, NetworkType, OutPoint, SatPoint
from ordwallet.backends.base import InscriptionIndex, WalletBackend
from ordwallet.errors import IndexNotSyncedError, SnapshotError
from ordwallet.inscriptions import list_wallet_inscriptions
from ordwallet.models import InscriptionInfo, WalletState
from ordwallet.snapshot import load_wallet_state

OP_1 = OutPoint("11" * 32, 0)
OP_2 = OutPoint("22" * 32, 1)
OP_3 = OutPoint("33" * 32, 0)
ID_A = InscriptionId("aa" * 32, 0)
ID_B = InscriptionId("bb" * 32, 0)


def mock_wallet(height: int = 100, locked: set[OutPoint] | None = None) -> MagicMock:
    wallet = MagicMock(spec=WalletBackend)
    wallet.get_block_count = AsyncMock(return_value=height)
    wallet.get_unspent_outputs = AsyncMock(return_value={OP_1: 1000, OP_2: 5000, OP_3: 20_000})
    wallet.get_locked_outputs = AsyncMock(return_value=locked or set())
    return wallet


def mock_index(
    height: int = 100, placements: dict[InscriptionId, SatPoint] | None = None
) -> MagicMock:
    placements = placements if placements is not None else {}
    by_output: dict[OutPoint, list[InscriptionId]] = {}
    for inscription_id, satpoint in placements.items():
        by_output.setdefault(satpoint.outpoint, []).append(inscription_id)

    index = MagicMock(spec=InscriptionIndex)
    index.get_block_height = AsyncMock(return_value=height)
    index.get_output_inscriptions = AsyncMock(side_effect=lambda op: by_output.get(op, []))
    index.get_inscription = AsyncMock(
        side_effect=lambda i: InscriptionInfo(i, placements[i], number=7, sat=99)
    )
    return index


class TestLoadWalletState:
    @pytest.mark.asyncio
    async def test_loads_outputs_and_inscriptions(self) -> None:
        placements = {ID_A: SatPoint(OP_1, 0), ID_B: SatPoint(OP_1, 600)}
        wallet = mock_wallet(locked={OP_3})
        index = mock_index(placements=placements)

        state = await load_wallet_state(wallet, index)

        assert dict(state.unspent_outputs) == {OP_1: 1000, OP_2: 5000, OP_3: 20_000}
        assert state.locked_outputs == frozenset({OP_3})
        assert dict(state.inscriptions) == placements
        assert state.details[ID_A].number == 7
        assert state.inscriptions_on_output(OP_1) == [
            (SatPoint(OP_1, 0), ID_A),
            (SatPoint(OP_1, 600), ID_B),
        ]
        assert state.uninscribed_unlocked() == {OP_2: 5000}
        assert index.get_output_inscriptions.await_count == 3

    @pytest.mark.asyncio
    async def test_locks_read_once_and_passed_through(self) -> None:
        wallet = mock_wallet(locked={OP_3})

        await load_wallet_state(wallet, mock_index())

        wallet.get_locked_outputs.assert_awaited_once()
        wallet.get_unspent_outputs.assert_awaited_once_with({OP_3})

    @pytest.mark.asyncio
    async def test_index_behind_node(self) -> None:
        wallet = mock_wallet(height=101)
        index = mock_index(height=100)

        with pytest.raises(IndexNotSyncedError, match="height 100 but the node is at 101"):
            await load_wallet_state(wallet, index)

        wallet.get_unspent_outputs.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_index_ahead_of_node_is_fine(self) -> None:
        state = await load_wallet_state(mock_wallet(height=100), mock_index(height=101))
        assert state.inscriptions == {}

    @pytest.mark.asyncio
    async def test_satpoint_on_other_output(self) -> None:
        wallet = mock_wallet()
        index = mock_index(placements={ID_A: SatPoint(OP_1, 0)})
        index.get_inscription = AsyncMock(return_value=InscriptionInfo(ID_A, SatPoint(OP_2, 0)))

        with pytest.raises(SnapshotError, match="locates it at"):
            await load_wallet_state(wallet, index)


class TestWalletState:
    def test_snapshot_is_read_only(self) -> None:
        outputs = {OP_1: 1000}
        state = WalletState(unspent_outputs=outputs)
        outputs[OP_2] = 5000

        assert OP_2 not in state.unspent_outputs
        with pytest.raises(TypeError):
            state.unspent_outputs[OP_2] = 5000  # type: ignore[index]

    def test_value_and_lock_queries(self) -> None:
        state = WalletState(unspent_outputs={OP_1: 1000, OP_2: 5000}, locked_outputs={OP_2})

        assert state.value_of(OP_1) == 1000
        assert state.value_of(OP_3) is None
        assert state.total_value == 6000
        assert state.uninscribed_unlocked(exclude=[OP_1]) == {}


class TestListWalletInscriptions:
    def test_sorted_by_location_with_explorer(self) -> None:
        state = WalletState(
            unspent_outputs={OP_1: 1000, OP_2: 5000},
            inscriptions={ID_A: SatPoint(OP_2, 0), ID_B: SatPoint(OP_1, 0)},
            details={ID_A: InscriptionInfo(ID_A, SatPoint(OP_2, 0), number=5, sat=123)},
        )

        entries = [e.to_dict() for e in list_wallet_inscriptions(state, NetworkType.SIGNET)]

        assert [e["inscription"] for e in entries] == [str(ID_B), str(ID_A)]
        assert entries[0]["number"] is None
        assert entries[1] == {
            "inscription": str(ID_A),
            "location": f"{OP_2}:0",
            "number": 5,
            "sat": 123,
            "explorer": f"https://signet.ordinals.com/inscription/{ID_A}",
        }

    def test_skips_spent_outputs(self) -> None:
        state = WalletState(
            unspent_outputs={OP_1: 1000},
            inscriptions={ID_A: SatPoint(OP_3, 0)},
        )

        assert list_wallet_inscriptions(state, NetworkType.MAINNET) == []
