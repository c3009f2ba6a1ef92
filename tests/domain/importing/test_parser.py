from __future__ import annotations

from datetime import date

import pytest

from tradelane.domain.importing import (
    EmptyInputError,
    MissingRequiredColumnsError,
    WarningKind,
    parse_shipments,
)

TODAY = date(2024, 7, 1)
HEADER = "House BOL Number,Shipper Name,Consignee Name,Consignee City,Arrival Date,TEU"


def _parse(text: str):
    return parse_shipments(text, today=TODAY, batch_token="tok")


def test_parses_rows_in_source_order_with_defaults() -> None:
    text = (
        f"{HEADER}\n"
        "HBL-200001,Acme Global Logistics,Walmart DC #405,Los Angeles,2024-06-01,2\n"
        "HBL-200002,Blue Ocean Trading,Target Stores,Chicago,06/15/2024,1.5\n"
    )

    result = _parse(text)

    assert [record.key for record in result.records] == ["HBL-200001", "HBL-200002"]
    first = result.records[0]
    assert first.line_number == 2
    assert first.shipment.teu == 2.0
    assert first.shipment.arrival_date == date(2024, 6, 1)
    assert first.shipment.place_of_receipt == "Unknown Origin"
    assert first.shipment.us_arrival_port == "Unknown Port"
    assert first.shipment.nvocc_name == "Unknown NVOCC"
    assert first.shipment.vocc_name == "Unknown Carrier"
    assert first.shipment.consignee_address == ""
    assert first.shipment.vocc_code == ""
    assert first.shipment.notify_party is None
    assert "place_of_receipt" in first.defaulted_fields
    assert "shipper_name" not in first.defaulted_fields
    assert result.records[1].shipment.arrival_date == date(2024, 6, 15)
    assert result.warnings == []
    assert result.skipped_rows == 0


@pytest.mark.parametrize("text", ["", "\n\n", f"{HEADER}\n", f"\r\n{HEADER}\r\n  \r\n"])
def test_needs_header_and_data_row(text: str) -> None:
    with pytest.raises(EmptyInputError):
        _parse(text)


def test_missing_required_column_is_structural() -> None:
    with pytest.raises(MissingRequiredColumnsError) as excinfo:
        _parse("Shipper Name,Consignee Name\nAcme,Target\n")

    assert "house_bol_number" in excinfo.value.fields
    assert "teu" in excinfo.value.fields


def test_mixed_line_endings_and_blank_lines() -> None:
    text = (
        f"{HEADER}\r\n"
        "HBL-1,Acme,Target,Austin,2024-06-01,1\r\r"
        "HBL-2,Blue,Target,Austin,2024-06-02,1\n"
    )

    result = _parse(text)

    assert [record.key for record in result.records] == ["HBL-1", "HBL-2"]
    assert result.records[1].line_number == 4


def test_quoted_fields_keep_commas_and_escaped_quotes() -> None:
    text = f'{HEADER}\n"HBL-1","Acme, Inc.","Buyer ""Prime""",Austin,2024-06-01," 3 "\n'

    shipment = _parse(text).records[0].shipment

    assert shipment.shipper_name == "Acme, Inc."
    assert shipment.consignee_name == 'Buyer "Prime"'
    assert shipment.teu == 3.0


def test_short_rows_are_skipped_and_counted() -> None:
    text = f"{HEADER}\nHBL-1,Acme,Target,Austin,2024-06-01,1\nHBL-2,Acme\n"

    result = _parse(text)

    assert len(result.records) == 1
    assert result.skipped_rows == 1
    warning = result.warnings[0]
    assert warning.kind is WarningKind.MALFORMED_ROW
    assert warning.line_number == 3


def test_missing_key_gets_synthetic_key() -> None:
    text = f"{HEADER}\n,Acme,Target,Austin,2024-06-01,1\n"

    record = _parse(text).records[0]

    assert record.key == "AUTO-tok-2"
    assert record.synthetic_key


def test_synthetic_keys_differ_between_runs() -> None:
    text = f"{HEADER}\n,Acme,Target,Austin,2024-06-01,1\n"

    first = parse_shipments(text, today=TODAY).records[0].key
    second = parse_shipments(text, today=TODAY).records[0].key

    assert first.startswith("AUTO-")
    assert first != second


def test_unparseable_date_falls_back_with_warning() -> None:
    text = f"{HEADER}\nHBL-1,Acme,Target,Austin,someday,1\nHBL-2,Acme,Target,Austin,,1\n"

    result = _parse(text)

    assert [record.shipment.arrival_date for record in result.records] == [TODAY, TODAY]
    assert [warning.kind for warning in result.warnings] == [
        WarningKind.DATE_FALLBACK,
        WarningKind.DATE_FALLBACK,
    ]
    assert "someday" in result.warnings[0].message
    assert "arrival_date" in result.records[0].defaulted_fields


@pytest.mark.parametrize(
    ("raw", "expected", "warned"),
    [
        ('"1,200"', 1200.0, False),
        ("0.5", 0.5, False),
        ("", 0.0, False),
        ("lots", 0.0, True),
        ("nan", 0.0, True),
    ],
)
def test_volume_parsing_is_permissive(raw: str, expected: float, warned: bool) -> None:
    text = f"{HEADER}\nHBL-1,Acme,Target,Austin,2024-06-01,{raw}\n"

    result = _parse(text)

    assert result.records[0].shipment.teu == expected
    kinds = [warning.kind for warning in result.warnings]
    assert (WarningKind.INVALID_VOLUME in kinds) is warned
