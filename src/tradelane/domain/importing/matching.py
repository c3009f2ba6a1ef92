"""Levenshtein-based entity name matching against the canonical registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from rapidfuzz.distance import Levenshtein

from .ledger import ConflictEntry

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tradelane.domain.model import NameField

    from .parser import CandidateRecord
    from .registry import CanonicalRegistry

DEFAULT_THRESHOLD: Final[int] = 3

log = logging.getLogger(__name__)


def edit_distance(left: str, right: str) -> int:
    """Case-insensitive Levenshtein distance with unit costs."""

    return Levenshtein.distance(left, right, processor=str.casefold)


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    candidate: str
    distance: int
    exact: bool = False


def find_closest(
    value: str,
    candidates: Iterable[str],
    threshold: int = DEFAULT_THRESHOLD,
) -> FuzzyMatch | None:
    """Return the nearest candidate for ``value``.

    A case-insensitive equal candidate is returned with ``exact=True``. Otherwise the
    minimum-distance candidate wins, ties going to the lexicographically smallest
    name, and it is returned only when its distance is within ``threshold``.
    """

    pool = list(candidates)
    folded = value.casefold()
    for candidate in pool:
        if candidate.casefold() == folded:
            return FuzzyMatch(candidate=candidate, distance=0, exact=True)
    if not pool:
        return None

    best = min(
        pool,
        key=lambda candidate: (edit_distance(value, candidate), candidate.casefold(), candidate),
    )
    distance = edit_distance(value, best)
    if 0 < distance <= threshold:
        return FuzzyMatch(candidate=best, distance=distance)
    return None


@dataclass(slots=True)
class MatchResult:
    entries: list[ConflictEntry] = field(default_factory=list[ConflictEntry])
    clean: list[CandidateRecord] = field(default_factory=list["CandidateRecord"])
    flagged: list[CandidateRecord] = field(default_factory=list["CandidateRecord"])


def match_entities(
    records: Sequence[CandidateRecord],
    registry: CanonicalRegistry,
    fields: Sequence[NameField],
    threshold: int = DEFAULT_THRESHOLD,
) -> MatchResult:
    """Flag name values that are near misses of registered names.

    Records are visited in order. Values that match nothing join a working copy of the
    registry so later rows of the same batch are compared against them; flagged values
    and defaulted placeholders never do.
    """

    working = registry.working_copy()
    result = MatchResult()
    for record in records:
        record_entries: list[ConflictEntry] = []
        for name_field in fields:
            value = record.shipment.name_value(name_field)
            if not value or name_field.value in record.defaulted_fields:
                continue
            match = find_closest(value, working.candidates(name_field), threshold)
            if match is None:
                working.add(name_field, value)
                continue
            if match.exact:
                continue
            record_entries.append(
                ConflictEntry(
                    key=record.key,
                    field=name_field,
                    imported=value,
                    suggestion=match.candidate,
                    distance=match.distance,
                )
            )

        if record_entries:
            result.flagged.append(record)
            result.entries.extend(record_entries)
        else:
            result.clean.append(record)

    log.debug(
        "Matched %s records: %s clean, %s flagged, %s conflicts",
        len(records),
        len(result.clean),
        len(result.flagged),
        len(result.entries),
    )
    return result
