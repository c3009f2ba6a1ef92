"""Header recognition for shipment CSV files.

Columns are located by keyword containment rather than exact names so exports from
different systems import without a mapping step. Each field lists its keywords from
most to least specific, and fields are resolved in ``COLUMN_SPECS`` order: a header
claimed by one field is never handed to a later one. This is what keeps a bare
``city`` keyword from stealing ``consignee city`` and ``vocc name`` from matching
``nvocc name``.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .errors import MissingRequiredColumnsError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

BYTE_ORDER_MARK: Final[str] = "\ufeff"


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    field: str
    label: str
    keywords: tuple[str, ...]
    required: bool = False
    default: str | None = None


COLUMN_SPECS: Final[tuple[ColumnSpec, ...]] = (
    ColumnSpec(
        field="consignee_city",
        label="Consignee City",
        keywords=("consignee city", "delivery city", "destination city", "city"),
        default="Unknown City",
    ),
    ColumnSpec(
        field="consignee_address",
        label="Consignee Address",
        keywords=("consignee address", "delivery address", "address"),
        default="",
    ),
    ColumnSpec(
        field="notify_party",
        label="Notify Party",
        keywords=("notify party", "notify"),
    ),
    ColumnSpec(
        field="place_of_receipt",
        label="Place of Receipt",
        keywords=("place of receipt", "receipt", "port of loading", "origin"),
        default="Unknown Origin",
    ),
    ColumnSpec(
        field="us_arrival_port",
        label="US Arrival Port",
        keywords=("us arrival port", "arrival port", "port of arrival", "port of discharge"),
        default="Unknown Port",
    ),
    ColumnSpec(
        field="arrival_date",
        label="Arrival Date",
        keywords=("arrival date", "arrival", "date"),
    ),
    ColumnSpec(
        field="nvocc_name",
        label="NVOCC Name",
        keywords=("nvocc name", "nvocc", "forwarder"),
        default="Unknown NVOCC",
    ),
    ColumnSpec(
        field="vocc_code",
        label="VOCC Code",
        keywords=("vocc code", "scac", "carrier code"),
        default="",
    ),
    ColumnSpec(
        field="vocc_name",
        label="VOCC Name",
        keywords=("vocc name", "carrier name", "vocc", "carrier"),
        default="Unknown Carrier",
    ),
    ColumnSpec(
        field="house_bol_number",
        label="House BOL Number",
        keywords=("house bol", "house bill", "hbl", "bol number", "bill of lading", "bol"),
        required=True,
    ),
    ColumnSpec(
        field="shipper_name",
        label="Shipper Name",
        keywords=("shipper name", "shipper", "exporter", "supplier"),
        required=True,
        default="Unknown Shipper",
    ),
    ColumnSpec(
        field="consignee_name",
        label="Consignee Name",
        keywords=("consignee name", "consignee", "importer", "buyer"),
        default="Unknown Consignee",
    ),
    ColumnSpec(
        field="teu",
        label="TEU",
        keywords=("teu", "volume", "containers"),
        required=True,
    ),
)

SPEC_BY_FIELD: Final[Mapping[str, ColumnSpec]] = {spec.field: spec for spec in COLUMN_SPECS}
REQUIRED_FIELDS: Final[tuple[str, ...]] = tuple(
    spec.field for spec in COLUMN_SPECS if spec.required
)

TEMPLATE_FIELD_ORDER: Final[tuple[str, ...]] = (
    "house_bol_number",
    "shipper_name",
    "consignee_name",
    "consignee_city",
    "consignee_address",
    "notify_party",
    "place_of_receipt",
    "us_arrival_port",
    "arrival_date",
    "teu",
    "nvocc_name",
    "vocc_code",
    "vocc_name",
)
TEMPLATE_HEADERS: Final[tuple[str, ...]] = tuple(
    SPEC_BY_FIELD[field].label for field in TEMPLATE_FIELD_ORDER
)
TEMPLATE_EXAMPLE_ROW: Final[tuple[str, ...]] = (
    "HBL-123456",
    "Acme Global Logistics",
    "Walmart DC #405",
    "Los Angeles",
    "123 Industrial Blvd",
    "Walmart DC #405",
    "Shanghai",
    "Long Beach",
    "2024-06-01",
    "2",
    "Expeditors",
    "MAEU",
    "Maersk Line",
)


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Resolved header index per shipment field."""

    indices: Mapping[str, int]

    def index_for(self, field: str) -> int | None:
        return self.indices.get(field)

    def value(self, row: Sequence[str], field: str) -> str:
        index = self.indices.get(field)
        if index is None or index >= len(row):
            return ""
        return row[index].strip()


def normalize_header(header: str) -> str:
    text = header.replace(BYTE_ORDER_MARK, "").strip().lower()
    text = text.replace("_", " ")
    return " ".join(text.split())


def resolve_columns(headers: Iterable[str]) -> ColumnMap:
    """Locate every known field in ``headers``.

    Raises ``MissingRequiredColumnsError`` naming all mandatory fields that could not
    be found.
    """

    normalized = [normalize_header(header) for header in headers]
    claimed: set[int] = set()
    indices: dict[str, int] = {}
    for spec in COLUMN_SPECS:
        index = _find_column(normalized, spec.keywords, claimed)
        if index is None:
            continue
        indices[spec.field] = index
        claimed.add(index)

    missing = [field for field in REQUIRED_FIELDS if field not in indices]
    if missing:
        raise MissingRequiredColumnsError(missing)
    return ColumnMap(indices=indices)


def _find_column(
    headers: Sequence[str],
    keywords: Sequence[str],
    claimed: set[int],
) -> int | None:
    for keyword in keywords:
        # an exact header beats an earlier header that merely contains the keyword
        for index, header in enumerate(headers):
            if index not in claimed and header == keyword:
                return index
        for index, header in enumerate(headers):
            if index not in claimed and keyword in header:
                return index
    return None


def render_template() -> str:
    """Return the downloadable CSV template: header row plus one example row."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TEMPLATE_HEADERS)
    writer.writerow(TEMPLATE_EXAMPLE_ROW)
    return buffer.getvalue()
