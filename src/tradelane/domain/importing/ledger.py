"""Conflict resolution ledger for fuzzy-matched entity names."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from .errors import UnknownConflictError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tradelane.domain.model import NameField, Shipment

log = logging.getLogger(__name__)


class Resolution(StrEnum):
    USE_SUGGESTION = "use_suggestion"
    KEEP_IMPORTED = "keep_imported"


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictEntry:
    """An imported name that is close to, but not equal to, a registered name."""

    key: str
    field: NameField
    imported: str
    suggestion: str
    distance: int
    resolution: Resolution = Resolution.USE_SUGGESTION

    def __post_init__(self) -> None:
        if self.suggestion == self.imported:
            raise ValueError("Suggestion must differ from the imported value")

    @property
    def id(self) -> str:
        return f"{self.key}#{self.field.value}"

    @property
    def chosen(self) -> str:
        if self.resolution is Resolution.USE_SUGGESTION:
            return self.suggestion
        return self.imported


class ConflictLedger:
    """Ordered worklist of conflict entries and the user's choice for each."""

    def __init__(self, entries: Iterable[ConflictEntry] = ()) -> None:
        self._entries: dict[str, ConflictEntry] = {}
        for entry in entries:
            self._entries[entry.id] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    @property
    def entries(self) -> list[ConflictEntry]:
        return list(self._entries.values())

    def get(self, entry_id: str) -> ConflictEntry:
        try:
            return self._entries[entry_id]
        except KeyError:
            raise UnknownConflictError(entry_id) from None

    def entries_for(self, key: str) -> list[ConflictEntry]:
        return [entry for entry in self._entries.values() if entry.key == key]

    def resolve(self, entry_id: str, resolution: Resolution) -> ConflictEntry:
        entry = replace(self.get(entry_id), resolution=Resolution(resolution))
        self._entries[entry_id] = entry
        return entry

    def resolve_all(self, resolution: Resolution) -> None:
        chosen = Resolution(resolution)
        for entry_id, entry in self._entries.items():
            self._entries[entry_id] = replace(entry, resolution=chosen)

    def finalize(self, records: Sequence[Shipment]) -> list[Shipment]:
        """Return new shipments with every ``use_suggestion`` entry applied.

        The input records are never modified, so repeated calls give equal results.
        """

        by_key: dict[str, list[ConflictEntry]] = {}
        for entry in self._entries.values():
            if entry.resolution is Resolution.USE_SUGGESTION:
                by_key.setdefault(entry.key, []).append(entry)

        finalized: list[Shipment] = []
        for record in records:
            shipment = record
            for entry in by_key.get(record.house_bol_number, ()):
                shipment = shipment.with_name(entry.field, entry.suggestion)
            finalized.append(shipment)
        log.debug(
            "Finalized %s records with %s applied suggestions",
            len(finalized),
            sum(len(entries) for entries in by_key.values()),
        )
        return finalized
