"""
Request file loading and validation.

Format: UTF-8 text, optional byte-order mark, one `<inscription-id>,<destination>`
record per line, no header. Blank or malformed lines are errors.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from ordcore.address import AddressError, AddressNetworkError, Destination, parse_address
from ordcore.models import InscriptionId, InscriptionIdError, NetworkType

from sendmany.errors import DuplicateRequestError, RequestFormatError

BYTE_ORDER_MARK = "\ufeff"


def parse_request_line(
    line: str, line_number: int, network: NetworkType
) -> tuple[InscriptionId, Destination]:
    fields = line.rstrip("\r\n").split(",")

    if not fields[0].strip():
        raise RequestFormatError(line_number, "no inscription id")
    if len(fields) < 2:
        raise RequestFormatError(line_number, "no comma")
    if len(fields) > 2:
        raise RequestFormatError(line_number, f"expected 2 fields, found {len(fields)}")

    try:
        inscription_id = InscriptionId.parse(fields[0].strip())
    except InscriptionIdError as e:
        raise RequestFormatError(line_number, f"bad inscription id: {e}") from e

    try:
        destination = parse_address(fields[1], network)
    except AddressNetworkError as e:
        raise RequestFormatError(line_number, f"bad network for address: {e}") from e
    except AddressError as e:
        raise RequestFormatError(line_number, f"bad address: {e}") from e

    return inscription_id, destination


def parse_requests(lines: Iterable[str], network: NetworkType) -> dict[InscriptionId, Destination]:
    """
    Parse request records into an ordered inscription -> destination mapping.

    Args:
        lines: Request file lines (line endings optional)
        network: Network every destination must belong to

    Returns:
        Mapping in file order

    Raises:
        RequestFormatError: malformed record (with 1-based line number)
        DuplicateRequestError: an inscription id requested twice
    """
    requested: dict[InscriptionId, Destination] = {}

    for line_number, line in enumerate(lines, start=1):
        if line_number == 1:
            line = line.lstrip(BYTE_ORDER_MARK)

        inscription_id, destination = parse_request_line(line, line_number, network)
        if inscription_id in requested:
            raise DuplicateRequestError(inscription_id, line_number)
        requested[inscription_id] = destination

    return requested


def read_request_file(path: Path, network: NetworkType) -> dict[InscriptionId, Destination]:
    """Read and parse a request file."""
    text = path.read_text(encoding="utf-8")
    # A final newline terminates the last record rather than starting an empty one
    return parse_requests(text.splitlines(), network)
