"""CSV record parser: raw delimited text to typed candidate shipments."""

from __future__ import annotations

import csv
import logging
import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from tradelane.domain.model import Shipment

from .columns import SPEC_BY_FIELD, ColumnMap, resolve_columns
from .dates import normalize_date
from .errors import EmptyInputError

if TYPE_CHECKING:
    from datetime import date

MIN_ROW_FIELDS: Final[int] = 3
SYNTHETIC_KEY_PREFIX: Final[str] = "AUTO"
_LINE_BREAKS = re.compile(r"\r\n|\r|\n")

log = logging.getLogger(__name__)


class WarningKind(StrEnum):
    MALFORMED_ROW = "malformed_row"
    DATE_FALLBACK = "date_fallback"
    INVALID_VOLUME = "invalid_volume"


@dataclass(frozen=True, slots=True)
class ParseWarning:
    """Non-fatal problem found while parsing one line."""

    line_number: int
    kind: WarningKind
    message: str


@dataclass(frozen=True, slots=True, kw_only=True)
class CandidateRecord:
    """One parsed shipment row awaiting deduplication and matching."""

    shipment: Shipment
    line_number: int
    synthetic_key: bool = False
    defaulted_fields: frozenset[str] = frozenset()

    @property
    def key(self) -> str:
        return self.shipment.house_bol_number


@dataclass(slots=True)
class ParseResult:
    records: list[CandidateRecord]
    columns: ColumnMap
    warnings: list[ParseWarning] = field(default_factory=list[ParseWarning])

    @property
    def skipped_rows(self) -> int:
        return sum(1 for warning in self.warnings if warning.kind is WarningKind.MALFORMED_ROW)


def parse_shipments(
    text: str,
    *,
    today: date | None = None,
    batch_token: str | None = None,
) -> ParseResult:
    """Parse ``text`` into candidate records in source order.

    ``today`` replaces arrival dates that cannot be parsed. ``batch_token`` makes the
    synthetic keys of key-less rows unique to this run.
    """

    lines = [
        (number, line)
        for number, line in enumerate(_LINE_BREAKS.split(text), start=1)
        if line.strip()
    ]
    if len(lines) < 2:
        raise EmptyInputError

    _, header_line = lines[0]
    headers = _split_row(header_line)
    columns = resolve_columns(headers if headers is not None else header_line.split(","))

    fallback_date = today or datetime.now(UTC).date()
    token = batch_token or uuid.uuid4().hex[:8]
    result = ParseResult(records=[], columns=columns)

    for line_number, line in lines[1:]:
        cells = _split_row(line)
        if cells is None or len(cells) < MIN_ROW_FIELDS:
            result.warnings.append(
                ParseWarning(
                    line_number=line_number,
                    kind=WarningKind.MALFORMED_ROW,
                    message=f"Line {line_number}: skipped malformed row",
                )
            )
            continue
        builder = _RecordBuilder(
            cells=cells,
            columns=columns,
            line_number=line_number,
            today=fallback_date,
            warnings=result.warnings,
        )
        result.records.append(builder.build(token))

    log.info(
        "Parsed %s candidate records (%s skipped, %s warnings)",
        len(result.records),
        result.skipped_rows,
        len(result.warnings),
    )
    return result


def _split_row(line: str) -> list[str] | None:
    try:
        row = next(csv.reader([line]), [])
    except csv.Error:
        return None
    return [cell.strip() for cell in row]


@dataclass(slots=True)
class _RecordBuilder:
    cells: list[str]
    columns: ColumnMap
    line_number: int
    today: date
    warnings: list[ParseWarning]
    defaulted: set[str] = field(default_factory=set[str])

    def build(self, batch_token: str) -> CandidateRecord:
        key = self.columns.value(self.cells, "house_bol_number")
        synthetic = not key
        if synthetic:
            key = f"{SYNTHETIC_KEY_PREFIX}-{batch_token}-{self.line_number}"

        shipment = Shipment(
            house_bol_number=key,
            shipper_name=self._text("shipper_name"),
            consignee_name=self._text("consignee_name"),
            consignee_city=self._text("consignee_city"),
            consignee_address=self._text("consignee_address"),
            notify_party=self.columns.value(self.cells, "notify_party") or None,
            place_of_receipt=self._text("place_of_receipt"),
            us_arrival_port=self._text("us_arrival_port"),
            arrival_date=self._arrival_date(),
            teu=self._teu(),
            nvocc_name=self._text("nvocc_name"),
            vocc_code=self._text("vocc_code"),
            vocc_name=self._text("vocc_name"),
        )
        return CandidateRecord(
            shipment=shipment,
            line_number=self.line_number,
            synthetic_key=synthetic,
            defaulted_fields=frozenset(self.defaulted),
        )

    def _text(self, field_name: str) -> str:
        value = self.columns.value(self.cells, field_name)
        if value:
            return value
        self.defaulted.add(field_name)
        return SPEC_BY_FIELD[field_name].default or ""

    def _arrival_date(self) -> date:
        raw = self.columns.value(self.cells, "arrival_date")
        normalized = normalize_date(raw, today=self.today)
        if normalized.fell_back:
            self.defaulted.add("arrival_date")
            reason = f"unparseable arrival date {raw!r}" if raw else "missing arrival date"
            self._warn(WarningKind.DATE_FALLBACK, f"{reason}, using {normalized.value}")
        return normalized.value

    def _teu(self) -> float:
        raw = self.columns.value(self.cells, "teu")
        if not raw:
            self.defaulted.add("teu")
            return 0.0
        try:
            value = float(raw.replace(",", ""))
        except ValueError:
            value = math.nan
        if not math.isfinite(value):
            self.defaulted.add("teu")
            self._warn(WarningKind.INVALID_VOLUME, f"non-numeric TEU {raw!r}, using 0")
            return 0.0
        return value

    def _warn(self, kind: WarningKind, detail: str) -> None:
        self.warnings.append(
            ParseWarning(
                line_number=self.line_number,
                kind=kind,
                message=f"Line {self.line_number}: {detail}",
            )
        )
