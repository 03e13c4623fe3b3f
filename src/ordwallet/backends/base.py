"""
Base wallet and inscription index interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ordcore.address import Destination
from ordcore.models import InscriptionId, NetworkType, OutPoint
from ordcore.transaction import Transaction

from ordwallet.models import InscriptionInfo


class WalletBackend(ABC):
    """
    Wallet holding the inscriptions and cardinals.
    Provides the wallet half of the snapshot and acts as signer and broadcaster.
    """

    @abstractmethod
    async def get_block_count(self) -> int:
        """Get current blockchain height"""

    @abstractmethod
    async def get_unspent_outputs(self, locked: Iterable[OutPoint] = ()) -> dict[OutPoint, int]:
        """Get wallet outputs and their values in sats, including the given locked outputs"""

    @abstractmethod
    async def get_locked_outputs(self) -> set[OutPoint]:
        """Get outputs locked by wallet policy"""

    @abstractmethod
    async def get_change_address(self, network: NetworkType) -> Destination:
        """Get a fresh change address, validated for `network`"""

    @abstractmethod
    async def sign_transaction(self, tx: Transaction) -> str:
        """Sign an unsigned transaction, returns signed raw hex"""

    @abstractmethod
    async def broadcast_transaction(self, tx_hex: str) -> str:
        """Broadcast transaction, returns txid"""

    async def close(self) -> None:
        """Close backend connection"""
        pass


class InscriptionIndex(ABC):
    """Index that tracks inscription locations."""

    @abstractmethod
    async def get_block_height(self) -> int:
        """Height the index has processed"""

    @abstractmethod
    async def get_output_inscriptions(self, outpoint: OutPoint) -> list[InscriptionId]:
        """Ids of all inscriptions on an output"""

    @abstractmethod
    async def get_inscription(self, inscription_id: InscriptionId) -> InscriptionInfo:
        """Current location and numbering of one inscription"""

    async def close(self) -> None:
        pass
