"""
ordcore - Core library for ord-sendmany components

Provides value types, address handling and transaction serialization.
"""

__version__ = "0.3.0"

from ordcore.address import (
    AddressError,
    AddressNetworkError,
    Destination,
    dust_threshold,
    parse_address,
    script_to_address,
)
from ordcore.models import (
    InscriptionId,
    InscriptionIdError,
    NetworkType,
    OutPoint,
    OutPointError,
    SatPoint,
)
from ordcore.transaction import (
    Transaction,
    TransactionParseError,
    TxIn,
    TxOut,
    deserialize_transaction,
)

__all__ = [
    "AddressError",
    "AddressNetworkError",
    "Destination",
    "InscriptionId",
    "InscriptionIdError",
    "NetworkType",
    "OutPoint",
    "OutPointError",
    "SatPoint",
    "Transaction",
    "TransactionParseError",
    "TxIn",
    "TxOut",
    "deserialize_transaction",
    "dust_threshold",
    "parse_address",
    "script_to_address",
]
