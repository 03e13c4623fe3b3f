"""
Transaction builder for batch inscription transfers.

Builds one unsigned transaction from:
- the outputs holding the requested inscriptions, split per destination
- one cardinal output paying the fee, with its remainder returned as change

Transaction structure:
- Inputs: inscribed outputs (discovery order), cardinal last
- Outputs: one per inscription (discovery order, ascending offset), change last
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger
from ordcore.address import Destination
from ordcore.constants import LOCKTIME_ZERO, SEQUENCE_ENABLE_RBF_NO_LOCKTIME, TX_VERSION
from ordcore.models import InscriptionId, OutPoint
from ordcore.transaction import Transaction, TxIn, TxOut
from ordwallet.models import WalletState

from sendmany.cardinals import select_cardinal
from sendmany.errors import ConsistencyError, InsufficientCardinalError, SendManyError
from sendmany.fees import FeeRate, estimate_fee
from sendmany.locator import ClaimedOutput, locate_outputs
from sendmany.splitter import split_output


class BuildStage(str, Enum):
    LOADING = "loading"
    LOCATING = "locating"
    SPLITTING = "splitting"
    SELECTING_CARDINAL = "selecting cardinal"
    ESTIMATING = "estimating"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SendManyResult:
    """A fully validated unsigned transaction and how it was put together."""

    transaction: Transaction
    fee: int
    vsize: int
    input_value: int
    change_value: int
    cardinal: OutPoint
    claimed_outputs: list[ClaimedOutput] = field(default_factory=list)

    @property
    def output_value(self) -> int:
        return self.transaction.output_value()


def build_transaction(inputs: list[OutPoint], outputs: list[TxOut]) -> Transaction:
    """Unsigned transaction, lock time zero, replace-by-fee signalled on every input."""
    return Transaction(
        inputs=[
            TxIn(previous_output=outpoint, sequence=SEQUENCE_ENABLE_RBF_NO_LOCKTIME)
            for outpoint in inputs
        ],
        outputs=outputs,
        version=TX_VERSION,
        lock_time=LOCKTIME_ZERO,
    )


class SendManyBuilder:
    """
    Builds batch inscription transfer transactions.

    A build either returns a complete SendManyResult or raises a SendManyError;
    nothing partial is ever returned. `stage` tracks where the last build got to.
    """

    def __init__(self, fee_rate: FeeRate):
        self.fee_rate = fee_rate
        self.stage = BuildStage.LOADING

    def _enter(self, stage: BuildStage) -> None:
        logger.debug(f"sendmany: {self.stage.value} -> {stage.value}")
        self.stage = stage

    def build(
        self,
        requests: Mapping[InscriptionId, Destination],
        state: WalletState,
        change: Destination,
    ) -> SendManyResult:
        """
        Build the unsigned transaction.

        Args:
            requests: inscription -> destination, in request order
            state: wallet snapshot
            change: where the cardinal's remainder goes

        Returns:
            SendManyResult

        Raises:
            ConsistencyError: requests don't match the wallet
            InsufficientValueError: a split output is dust or the cardinal can't pay
        """
        self.stage = BuildStage.LOADING
        try:
            result = self._build(requests, state, change)
        except SendManyError as e:
            logger.error(f"sendmany failed while {self.stage.value}: {e}")
            self._enter(BuildStage.FAILED)
            raise

        self._enter(BuildStage.DONE)
        return result

    def _build(
        self,
        requests: Mapping[InscriptionId, Destination],
        state: WalletState,
        change: Destination,
    ) -> SendManyResult:
        if not requests:
            raise ConsistencyError("no inscriptions requested")

        inputs: list[OutPoint] = []
        outputs: list[TxOut] = []
        claimed: list[ClaimedOutput] = []
        total_value = 0

        self._enter(BuildStage.LOCATING)
        for claimed_output in locate_outputs(requests, state):
            self._enter(BuildStage.SPLITTING)
            outputs.extend(split_output(claimed_output, requests))
            inputs.append(claimed_output.outpoint)
            claimed.append(claimed_output)
            total_value += claimed_output.value
            self._enter(BuildStage.LOCATING)

        self._enter(BuildStage.SELECTING_CARDINAL)
        cardinal_outpoint, cardinal_value = select_cardinal(state, claimed=inputs)
        logger.info(f"cardinal: {cardinal_outpoint}, worth {cardinal_value}")
        logger.info(f"inputs without cardinal: {total_value}")
        total_value += cardinal_value
        logger.info(f"inputs with cardinal: {total_value}")
        inputs.append(cardinal_outpoint)

        self._enter(BuildStage.ESTIMATING)
        dust_limit = change.dust_threshold
        # Provisional change output so the estimate covers the final shape
        outputs.append(TxOut(script_pubkey=change.script_pubkey, value=0))
        vsize, fee = estimate_fee(len(inputs), outputs, self.fee_rate)
        if cardinal_value < fee + dust_limit:
            raise InsufficientCardinalError(cardinal_outpoint, cardinal_value, fee, dust_limit)

        self._enter(BuildStage.ASSEMBLING)
        change_value = cardinal_value - fee
        logger.info(f"vsize: {vsize}, fee: {fee}, change: {change_value}")
        outputs[-1] = TxOut(script_pubkey=change.script_pubkey, value=change_value)

        return SendManyResult(
            transaction=build_transaction(inputs, outputs),
            fee=fee,
            vsize=vsize,
            input_value=total_value,
            change_value=change_value,
            cardinal=cardinal_outpoint,
            claimed_outputs=claimed,
        )
