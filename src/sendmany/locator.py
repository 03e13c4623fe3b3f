"""
Inscription locator: resolves requested inscriptions to the outputs holding them.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from ordcore.address import Destination
from ordcore.models import InscriptionId, OutPoint, SatPoint
from ordwallet.models import WalletState

from sendmany.errors import (
    ConsistencyError,
    MissingInscriptionError,
    UnrequestedInscriptionError,
)


@dataclass(frozen=True)
class ClaimedOutput:
    """A wallet output whose inscriptions are all being sent."""

    outpoint: OutPoint
    value: int
    inscriptions: tuple[tuple[SatPoint, InscriptionId], ...]


def locate_outputs(
    requests: Mapping[InscriptionId, Destination], state: WalletState
) -> Iterator[ClaimedOutput]:
    """
    Yield the outputs holding the requested inscriptions, in discovery order.

    Work queue in request order: take the next unresolved id, claim its whole
    output, and drop every inscription on that output from the queue.

    Raises:
        MissingInscriptionError: a requested inscription is not in the wallet
        UnrequestedInscriptionError: an output also holds an inscription not requested
        ConsistencyError: an inscribed output is not among the wallet's unspent outputs
    """
    for inscription_id in requests:
        if inscription_id not in state.inscriptions:
            raise MissingInscriptionError(inscription_id)

    queue = deque(requests)
    resolved: set[InscriptionId] = set()

    while queue:
        inscription_id = queue.popleft()
        if inscription_id in resolved:
            continue

        outpoint = state.inscriptions[inscription_id].outpoint
        on_output = state.inscriptions_on_output(outpoint)

        for _satpoint, other_id in on_output:
            if other_id not in requests:
                raise UnrequestedInscriptionError(other_id, inscription_id)

        value = state.value_of(outpoint)
        if value is None:
            raise ConsistencyError(f"output {outpoint} holding {inscription_id} is not unspent")

        resolved.update(other_id for _satpoint, other_id in on_output)
        yield ClaimedOutput(outpoint=outpoint, value=value, inscriptions=tuple(on_output))
