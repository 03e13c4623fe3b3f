"""
Cardinal selection: the uninscribed output that pays the fee.
"""

from __future__ import annotations

from collections.abc import Iterable

from ordcore.models import OutPoint
from ordwallet.models import WalletState

from sendmany.errors import NoCardinalsError


def get_cardinals(
    state: WalletState, claimed: Iterable[OutPoint] = ()
) -> list[tuple[OutPoint, int]]:
    """
    Uninscribed, unlocked, unclaimed outputs, biggest first.

    Equal values are ordered by descending outpoint so the order is deterministic.
    """
    cardinals = state.uninscribed_unlocked(exclude=claimed)
    return sorted(cardinals.items(), key=lambda item: (item[1], item[0]), reverse=True)


def select_cardinal(state: WalletState, claimed: Iterable[OutPoint] = ()) -> tuple[OutPoint, int]:
    # Biggest-first; no attempt is made to find the smallest sufficient cardinal
    cardinals = get_cardinals(state, claimed)
    if not cardinals:
        raise NoCardinalsError()
    return cardinals[0]
