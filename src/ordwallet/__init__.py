"""
ordwallet - Wallet, index and chain-data collaborators for ord-sendmany
"""

__version__ = "0.3.0"

from ordwallet.errors import (
    BroadcastError,
    ChainDataError,
    IndexNotSyncedError,
    RPCError,
    SigningError,
    SnapshotError,
    WalletBackendError,
)
from ordwallet.models import InscriptionInfo, WalletState
from ordwallet.snapshot import load_wallet_state

__all__ = [
    "BroadcastError",
    "ChainDataError",
    "IndexNotSyncedError",
    "InscriptionInfo",
    "RPCError",
    "SigningError",
    "SnapshotError",
    "WalletBackendError",
    "WalletState",
    "load_wallet_state",
]
