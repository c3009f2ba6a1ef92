from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tradelane.domain.importing import (
    CanonicalRegistry,
    edit_distance,
    find_closest,
    match_entities,
)
from tradelane.domain.model import NameField

if TYPE_CHECKING:
    from collections.abc import Callable

    from tradelane.domain.importing import CandidateRecord

FIELDS = tuple(NameField)


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("kitten", "sitting", 3),
        ("ACME", "acme", 0),
        ("", "abc", 3),
        ("abc", "", 3),
        ("flaw", "lawn", 2),
    ],
)
def test_edit_distance(left: str, right: str, expected: int) -> None:
    assert edit_distance(left, right) == expected
    assert edit_distance(right, left) == expected


def test_exact_match_ignores_case() -> None:
    match = find_closest("ACME GLOBAL LOGISTICS", {"Acme Global Logistics"})

    assert match is not None
    assert match.exact
    assert match.candidate == "Acme Global Logistics"


def test_near_match_within_threshold() -> None:
    match = find_closest("Acme Global Logistix", {"Acme Global Logistics"})

    assert match is not None
    assert not match.exact
    assert match.candidate == "Acme Global Logistics"
    assert match.distance == 2


def test_distant_value_has_no_match() -> None:
    assert find_closest("Totally Different Co", {"Acme Global Logistics"}) is None
    assert find_closest("Anything", []) is None


def test_threshold_is_inclusive() -> None:
    assert find_closest("abcdefgh", ["abcdwxyz"], threshold=3) is None
    match = find_closest("abcdefgh", ["abcdwxyz"], threshold=4)
    assert match is not None
    assert match.distance == 4


def test_ties_break_lexicographically() -> None:
    match = find_closest("abc", ["abe", "Abd"])

    assert match is not None
    assert match.candidate == "Abd"


def test_near_miss_against_registry_becomes_conflict(
    record_factory: Callable[..., CandidateRecord],
) -> None:
    registry = CanonicalRegistry.from_values({NameField.SHIPPER: ["Acme Global Logistics"]})
    record = record_factory(shipper_name="Acme Global Logistix")

    result = match_entities([record], registry, FIELDS)

    assert result.flagged == [record]
    assert result.clean == []
    [entry] = result.entries
    assert entry.id == "HBL-100000#shipper_name"
    assert entry.imported == "Acme Global Logistix"
    assert entry.suggestion == "Acme Global Logistics"
    assert entry.distance == 2


def test_case_only_difference_is_clean(record_factory: Callable[..., CandidateRecord]) -> None:
    registry = CanonicalRegistry.from_values({NameField.SHIPPER: ["Acme Global Logistics"]})
    record = record_factory(shipper_name="ACME GLOBAL LOGISTICS")

    result = match_entities([record], registry, FIELDS)

    assert result.entries == []
    assert result.clean == [record]


def test_earlier_rows_seed_later_matches(
    record_factory: Callable[..., CandidateRecord],
) -> None:
    first = record_factory(2, house_bol_number="HBL-1", consignee_name="Northwind Traders")
    second = record_factory(3, house_bol_number="HBL-2", consignee_name="Northwind Trader")
    registry = CanonicalRegistry()

    result = match_entities([first, second], registry, FIELDS)

    assert result.clean == [first]
    [entry] = result.entries
    assert entry.key == "HBL-2"
    assert entry.suggestion == "Northwind Traders"
    assert registry.values_for(NameField.CONSIGNEE) == frozenset()


def test_flagged_values_do_not_seed_later_matches(
    record_factory: Callable[..., CandidateRecord],
) -> None:
    registry = CanonicalRegistry.from_values({NameField.SHIPPER: ["Acme Global Logistics"]})
    first = record_factory(2, house_bol_number="HBL-1", shipper_name="Acme Global Logistix")
    second = record_factory(3, house_bol_number="HBL-2", shipper_name="Acme Global Logistix")

    result = match_entities([first, second], registry, FIELDS)

    assert result.flagged == [first, second]
    assert {entry.suggestion for entry in result.entries} == {"Acme Global Logistics"}


def test_defaulted_and_missing_values_are_not_matched(
    record_factory: Callable[..., CandidateRecord],
) -> None:
    registry = CanonicalRegistry.from_values({NameField.SHIPPER: ["Unknown Shippers"]})
    record = record_factory(
        shipper_name="Unknown Shipper",
        notify_party=None,
        defaulted=frozenset({"shipper_name"}),
    )

    result = match_entities([record], registry, FIELDS)

    assert result.entries == []


def test_matching_is_repeatable(record_factory: Callable[..., CandidateRecord]) -> None:
    registry = CanonicalRegistry.from_values(
        {
            NameField.SHIPPER: ["Acme Global Logistics"],
            NameField.CONSIGNEE: ["Walmart DC #404"],
        }
    )
    records = [
        record_factory(2, house_bol_number="HBL-1", shipper_name="Acme Global Logistix"),
        record_factory(3, house_bol_number="HBL-2"),
    ]

    first = match_entities(records, registry, FIELDS)
    second = match_entities(records, registry, FIELDS)

    assert first.entries == second.entries
    assert len(first.entries) == 3
    assert len(first.flagged) + len(first.clean) == len(records)


def test_only_configured_fields_are_compared(
    record_factory: Callable[..., CandidateRecord],
) -> None:
    registry = CanonicalRegistry.from_values({NameField.SHIPPER: ["Acme Global Logistics"]})
    record = record_factory(shipper_name="Acme Global Logistix")

    result = match_entities([record], registry, (NameField.CONSIGNEE,))

    assert result.entries == []
