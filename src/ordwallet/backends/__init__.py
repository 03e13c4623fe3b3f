"""
Wallet and index backend implementations.

Available backends:
- BitcoinCoreWallet: Bitcoin Core wallet RPC (UTXOs, locks, change, signing, broadcast)
- OrdServerIndex: `ord server` JSON API (inscription locations)
- RestClient: Bitcoin Core REST interface (raw blocks hashes and transactions, with retry)
"""

from ordwallet.backends.base import InscriptionIndex, WalletBackend
from ordwallet.backends.bitcoin_core import BitcoinCoreWallet
from ordwallet.backends.ord_server import OrdServerIndex
from ordwallet.backends.rest import RestClient

__all__ = [
    "BitcoinCoreWallet",
    "InscriptionIndex",
    "OrdServerIndex",
    "RestClient",
    "WalletBackend",
]
