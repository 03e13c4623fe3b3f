"""
Listing of the inscriptions held by a wallet.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ordcore.models import InscriptionId, NetworkType, SatPoint

from ordwallet.models import WalletState

EXPLORER_URLS = {
    NetworkType.MAINNET: "https://ordinals.com/inscription/",
    NetworkType.REGTEST: "http://localhost/inscription/",
    NetworkType.SIGNET: "https://signet.ordinals.com/inscription/",
    NetworkType.TESTNET: "https://testnet.ordinals.com/inscription/",
}


@dataclass
class WalletInscription:
    inscription: InscriptionId
    location: SatPoint
    explorer: str
    number: int | None = None
    sat: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "inscription": str(self.inscription),
            "location": str(self.location),
            "number": self.number,
            "sat": self.sat,
            "explorer": self.explorer,
        }


def list_wallet_inscriptions(state: WalletState, network: NetworkType) -> list[WalletInscription]:
    """Inscriptions on unspent wallet outputs, ordered by location."""
    explorer = EXPLORER_URLS[network]
    result = []

    by_location = sorted(state.inscriptions.items(), key=lambda kv: (kv[1], kv[0]))
    for inscription_id, satpoint in by_location:
        if satpoint.outpoint not in state.unspent_outputs:
            continue
        info = state.details.get(inscription_id)
        result.append(
            WalletInscription(
                inscription=inscription_id,
                location=satpoint,
                explorer=f"{explorer}{inscription_id}",
                number=info.number if info else None,
                sat=info.sat if info else None,
            )
        )

    return result
