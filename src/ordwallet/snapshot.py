"""
Load a WalletState snapshot from the wallet and the inscription index.
"""

from __future__ import annotations

from loguru import logger
from ordcore.models import InscriptionId, SatPoint

from ordwallet.backends.base import InscriptionIndex, WalletBackend
from ordwallet.errors import IndexNotSyncedError, SnapshotError
from ordwallet.models import InscriptionInfo, WalletState


async def load_wallet_state(wallet: WalletBackend, index: InscriptionIndex) -> WalletState:
    """
    Read wallet outputs and the inscriptions on them, once.

    The index must have processed at least as many blocks as the node,
    otherwise inscription locations could be stale.

    Raises:
        IndexNotSyncedError: index is behind the node
        SnapshotError: index and wallet disagree about an inscription's output
    """
    node_height = await wallet.get_block_count()
    index_height = await index.get_block_height()
    if index_height < node_height:
        raise IndexNotSyncedError(
            f"ord index is at height {index_height} but the node is at {node_height}; "
            "wait for the index to catch up"
        )

    # Locks are read once; locked outputs are valued from the same set
    locked_outputs = await wallet.get_locked_outputs()
    unspent_outputs = await wallet.get_unspent_outputs(locked_outputs)

    inscriptions: dict[InscriptionId, SatPoint] = {}
    details: dict[InscriptionId, InscriptionInfo] = {}

    for outpoint in sorted(unspent_outputs):
        for inscription_id in await index.get_output_inscriptions(outpoint):
            info = await index.get_inscription(inscription_id)
            if info.satpoint.outpoint != outpoint:
                raise SnapshotError(
                    f"index lists {inscription_id} on {outpoint} but locates it at {info.satpoint}"
                )
            inscriptions[inscription_id] = info.satpoint
            details[inscription_id] = info

    state = WalletState(
        unspent_outputs=unspent_outputs,
        locked_outputs=frozenset(locked_outputs),
        inscriptions=inscriptions,
        details=details,
    )
    logger.info(
        f"Loaded wallet snapshot at height {node_height}: {len(unspent_outputs)} outputs "
        f"worth {state.total_value} sats, "
        f"{len(locked_outputs)} locked, {len(inscriptions)} inscriptions"
    )
    return state
