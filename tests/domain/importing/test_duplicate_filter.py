from __future__ import annotations

from typing import TYPE_CHECKING

from tradelane.domain.importing import (
    DuplicateFilterResult,
    ImportBatch,
    MatchResult,
    WorkingRegistry,
    filter_duplicates,
)
from tradelane.domain.model import NameField

if TYPE_CHECKING:
    from collections.abc import Callable

    from tradelane.domain.importing import CandidateRecord


def test_existing_key_is_rejected(record_factory: Callable[..., CandidateRecord]) -> None:
    existing = record_factory(2, house_bol_number="HBL-100000")
    fresh = record_factory(3, house_bol_number="HBL-100001")

    result = filter_duplicates([existing, fresh], {"HBL-100000"})

    assert result.rejected == [existing]
    assert result.accepted == [fresh]


def test_repeated_key_within_batch_keeps_first(
    record_factory: Callable[..., CandidateRecord],
) -> None:
    first = record_factory(2, house_bol_number="HBL-1")
    second = record_factory(3, house_bol_number="HBL-2")
    repeat = record_factory(4, house_bol_number="HBL-1")

    result = filter_duplicates([first, second, repeat], set())

    assert result.accepted == [first, second]
    assert result.rejected == [repeat]


def test_partitions_are_disjoint_and_complete(
    record_factory: Callable[..., CandidateRecord],
) -> None:
    records = [
        record_factory(line, house_bol_number=key)
        for line, key in enumerate(["A", "B", "A", "C", "D"], start=2)
    ]

    result = filter_duplicates(records, frozenset({"C"}))

    assert len(result.accepted) + len(result.rejected) == len(records)
    assert not {id(record) for record in result.accepted} & {
        id(record) for record in result.rejected
    }
    assert [record.key for record in result.accepted] == ["A", "B", "D"]


def test_result_containers_start_empty() -> None:
    assert DuplicateFilterResult().accepted == []
    assert MatchResult().flagged == []
    assert ImportBatch(records=[]).clean == []
    assert WorkingRegistry().candidates(NameField.SHIPPER) == []
