"""
Fee estimation from the virtual size of a placeholder signed transaction.

Each input is sized with a single 64-byte witness element, the size of a
Schnorr signature for a taproot key-path spend. Inputs that need bigger
witnesses (P2WPKH, multisig) are underestimated.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, Decimal, InvalidOperation

from ordcore.constants import (
    LOCKTIME_ZERO,
    SCHNORR_SIGNATURE_SIZE,
    SEQUENCE_ENABLE_RBF_NO_LOCKTIME,
    TX_VERSION,
)
from ordcore.models import OutPoint
from ordcore.transaction import Transaction, TxIn, TxOut

NULL_OUTPOINT = OutPoint("00" * 32, 0xFFFFFFFF)


class FeeRate:
    """Fee rate in sat/vB."""

    def __init__(self, sat_per_vb: Decimal | str | int | float):
        try:
            rate = Decimal(str(sat_per_vb))
        except InvalidOperation as e:
            raise ValueError(f"invalid fee rate '{sat_per_vb}'") from e
        if not rate.is_finite():
            raise ValueError(f"fee rate must be finite, got {sat_per_vb}")
        if rate < 0:
            raise ValueError(f"fee rate must not be negative, got {sat_per_vb}")
        self.sat_per_vb = rate

    def fee(self, vsize: int) -> int:
        """Fee in sats for `vsize` vbytes, rounded up."""
        return int((self.sat_per_vb * vsize).to_integral_value(rounding=ROUND_CEILING))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FeeRate) and self.sat_per_vb == other.sat_per_vb

    def __hash__(self) -> int:
        return hash(self.sat_per_vb)

    def __repr__(self) -> str:
        return f"FeeRate({self.sat_per_vb} sat/vB)"


def estimate_vsize(input_count: int, outputs: list[TxOut]) -> int:
    """Virtual size of the transaction once every input carries a signature."""
    placeholder = Transaction(
        inputs=[
            TxIn(
                previous_output=NULL_OUTPOINT,
                sequence=SEQUENCE_ENABLE_RBF_NO_LOCKTIME,
                witness=[bytes(SCHNORR_SIGNATURE_SIZE)],
            )
            for _ in range(input_count)
        ],
        outputs=list(outputs),
        version=TX_VERSION,
        lock_time=LOCKTIME_ZERO,
    )
    return placeholder.vsize()


def estimate_fee(input_count: int, outputs: list[TxOut], fee_rate: FeeRate) -> tuple[int, int]:
    """Returns (vsize, fee)."""
    vsize = estimate_vsize(input_count, outputs)
    return vsize, fee_rate.fee(vsize)
