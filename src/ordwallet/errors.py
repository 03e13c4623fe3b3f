"""
Errors raised by wallet and index collaborators.
"""

from __future__ import annotations


class WalletBackendError(Exception):
    """Base class for failures talking to the node, wallet or index."""

    pass


class RPCError(WalletBackendError):
    def __init__(self, method: str, code: int | str, message: str):
        self.method = method
        self.code = code
        super().__init__(f"RPC error {code} in {method}: {message}")


class SigningError(WalletBackendError):
    pass


class BroadcastError(WalletBackendError):
    pass


class SnapshotError(WalletBackendError):
    """The wallet/index snapshot could not be loaded or is inconsistent."""

    pass


class IndexNotSyncedError(SnapshotError):
    pass


class ChainDataError(WalletBackendError):
    """Raw chain data could not be fetched, after any retries."""

    pass
