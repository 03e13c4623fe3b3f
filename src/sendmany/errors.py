"""
Build failures for the sendmany transaction builder.

Every failure aborts the whole build; no partial transaction is returned.
"""

from __future__ import annotations

from ordcore.models import InscriptionId, OutPoint, SatPoint


class SendManyError(Exception):
    """Base class for build failures"""

    pass


class RequestFormatError(SendManyError):
    """Malformed request record, bad inscription id or address, or wrong network."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"{reason} on line {line_number}")


class ConsistencyError(SendManyError):
    """The request does not match the wallet's inscriptions."""

    pass


class DuplicateRequestError(ConsistencyError):
    def __init__(self, inscription_id: InscriptionId, line_number: int):
        self.inscription_id = inscription_id
        self.line_number = line_number
        super().__init__(f"duplicate entry for {inscription_id} on line {line_number}")


class MissingInscriptionError(ConsistencyError):
    def __init__(self, inscription_id: InscriptionId):
        self.inscription_id = inscription_id
        super().__init__(f"inscription {inscription_id} isn't in the wallet")


class UnrequestedInscriptionError(ConsistencyError):
    def __init__(self, unrequested: InscriptionId, requested: InscriptionId):
        self.inscription_id = unrequested
        self.requested_id = requested
        super().__init__(
            f"inscription {unrequested} is in the same output as {requested} "
            "but wasn't in the request file"
        )


class NonZeroOffsetError(ConsistencyError):
    def __init__(self, outpoint: OutPoint, offset: int):
        self.outpoint = outpoint
        self.offset = offset
        super().__init__(f"the first inscription in {outpoint} is at non-zero offset {offset}")


class NoCardinalsError(ConsistencyError):
    def __init__(self) -> None:
        super().__init__("wallet has no cardinals")


class InsufficientValueError(SendManyError, ValueError):
    """An output or the fee-paying input is too small."""

    pass


class DustOutputError(InsufficientValueError):
    def __init__(
        self,
        inscription_id: InscriptionId,
        satpoint: SatPoint,
        value: int,
        dust_limit: int,
        address: str,
    ):
        self.inscription_id = inscription_id
        self.satpoint = satpoint
        self.value = value
        self.dust_limit = dust_limit
        super().__init__(
            f"inscription {inscription_id} at {satpoint} is only followed by {value} sats, "
            f"less than dust limit {dust_limit} for address {address}"
        )


class InsufficientCardinalError(InsufficientValueError):
    def __init__(self, outpoint: OutPoint, have: int, fee: int, dust_limit: int):
        self.outpoint = outpoint
        self.have = have
        self.fee = fee
        self.dust_limit = dust_limit
        self.needed = fee + dust_limit
        self.shortfall = self.needed - have
        super().__init__(
            f"cardinal {outpoint} is too small: needed {self.needed} "
            f"(fee {fee} plus dust limit {dust_limit}), have {have}, "
            f"short by {self.shortfall}"
        )
