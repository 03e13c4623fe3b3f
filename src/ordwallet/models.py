"""
Wallet data models.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ordcore.models import InscriptionId, OutPoint, SatPoint


@dataclass(frozen=True)
class InscriptionInfo:
    """Index view of one inscription"""

    inscription_id: InscriptionId
    satpoint: SatPoint
    number: int | None = None
    sat: int | None = None


@dataclass(frozen=True, eq=False)
class WalletState:
    """
    Immutable snapshot of the wallet as seen by the index.

    - unspent_outputs: every wallet output and its value in sats (locked outputs included)
    - locked_outputs: outputs excluded from spending by wallet policy
    - inscriptions: inscription id -> current satpoint, for inscriptions on wallet outputs
    - details: optional per-inscription index data (number, sat)

    Mappings are exposed as read-only views.
    """

    unspent_outputs: Mapping[OutPoint, int]
    locked_outputs: frozenset[OutPoint] = frozenset()
    inscriptions: Mapping[InscriptionId, SatPoint] = field(default_factory=dict)
    details: Mapping[InscriptionId, InscriptionInfo] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "unspent_outputs", MappingProxyType(dict(self.unspent_outputs)))
        object.__setattr__(self, "locked_outputs", frozenset(self.locked_outputs))
        object.__setattr__(self, "inscriptions", MappingProxyType(dict(self.inscriptions)))
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

        by_output: dict[OutPoint, list[tuple[SatPoint, InscriptionId]]] = {}
        for inscription_id, satpoint in self.inscriptions.items():
            by_output.setdefault(satpoint.outpoint, []).append((satpoint, inscription_id))
        output_inscriptions = {
            outpoint: tuple(sorted(items)) for outpoint, items in by_output.items()
        }
        object.__setattr__(self, "_output_inscriptions", MappingProxyType(output_inscriptions))

    @property
    def inscribed_outputs(self) -> frozenset[OutPoint]:
        return frozenset(self._output_inscriptions)  # type: ignore[attr-defined]

    def inscriptions_on_output(self, outpoint: OutPoint) -> list[tuple[SatPoint, InscriptionId]]:
        """All inscriptions on `outpoint`, ascending by offset."""
        return list(self._output_inscriptions.get(outpoint, ()))  # type: ignore[attr-defined]

    def value_of(self, outpoint: OutPoint) -> int | None:
        return self.unspent_outputs.get(outpoint)

    def uninscribed_unlocked(self, exclude: Iterable[OutPoint] = ()) -> dict[OutPoint, int]:
        """Outputs hosting no inscription and not locked, minus `exclude`."""
        skip = self.inscribed_outputs | self.locked_outputs | frozenset(exclude)
        return {
            outpoint: value
            for outpoint, value in self.unspent_outputs.items()
            if outpoint not in skip
        }

    @property
    def total_value(self) -> int:
        return sum(self.unspent_outputs.values())
