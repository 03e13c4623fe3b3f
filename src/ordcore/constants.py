"""
Bitcoin protocol and relay-policy constants.

Dust values follow Bitcoin Core's GetDustThreshold() at the default
dustrelayfee of 3000 sat/kvB:
- P2PKH: 546 sats
- P2SH: 540 sats
- P2WPKH: 294 sats
- P2WSH / P2TR: 330 sats
"""

from __future__ import annotations

SATS_PER_BTC = 100_000_000

# Default -dustrelayfee in Bitcoin Core (sat/kvB)
DUST_RELAY_FEE = 3000

# Size of a spending input without its script: outpoint (36) + sequence (4) + script len (1)
SPEND_INPUT_BASE_SIZE = 32 + 4 + 1 + 4

# Typical P2PKH scriptSig size, and its witness-discounted counterpart
SPEND_SCRIPT_SIG_SIZE = 107
SPEND_WITNESS_SIZE = 107 // 4

# Witness element pushed for each input while sizing a placeholder transaction
SCHNORR_SIGNATURE_SIZE = 64

# nSequence that signals replace-by-fee (BIP125) without enabling a relative lock time
SEQUENCE_ENABLE_RBF_NO_LOCKTIME = 0xFFFFFFFD
SEQUENCE_FINAL = 0xFFFFFFFF

TX_VERSION = 1
LOCKTIME_ZERO = 0

WITNESS_SCALE_FACTOR = 4
