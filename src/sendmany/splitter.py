"""
Output splitter: divides a claimed output between its inscriptions' destinations.
"""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger
from ordcore.address import Destination
from ordcore.models import InscriptionId
from ordcore.transaction import TxOut

from sendmany.errors import DustOutputError, NonZeroOffsetError
from sendmany.locator import ClaimedOutput


def split_output(
    claimed: ClaimedOutput, requests: Mapping[InscriptionId, Destination]
) -> list[TxOut]:
    """
    One output per inscription, in offset order.

    Inscription i keeps the sats from its offset up to the next inscription's
    offset; the last one keeps the rest of the output. The values sum to the
    claimed output's value.

    Raises:
        NonZeroOffsetError: sats before the first inscription would be unaccounted for
        DustOutputError: a split value is below its destination's dust limit
    """
    inscriptions = claimed.inscriptions
    first_satpoint, _first_id = inscriptions[0]
    if first_satpoint.offset != 0:
        raise NonZeroOffsetError(claimed.outpoint, first_satpoint.offset)

    logger.info(f"output {claimed.outpoint}, worth {claimed.value}:")

    outputs = []
    for i, (satpoint, inscription_id) in enumerate(inscriptions):
        destination = requests[inscription_id]
        offset = satpoint.offset
        if i == len(inscriptions) - 1:
            value = claimed.value - offset
        else:
            value = inscriptions[i + 1][0].offset - offset

        dust_limit = destination.dust_threshold
        if value < dust_limit:
            raise DustOutputError(inscription_id, satpoint, value, dust_limit, destination.address)

        logger.info(
            f"  {i} : offset: {offset}, value: {value}, id: {inscription_id}, dest: {destination}"
        )
        outputs.append(TxOut(script_pubkey=destination.script_pubkey, value=value))

    return outputs
