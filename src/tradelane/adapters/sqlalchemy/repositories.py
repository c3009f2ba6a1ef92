"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import insert, select, update

from tradelane.adapters.sqlalchemy.mappings import (
    SHIPMENT_VALUE_COLUMNS,
    shipment_from_row,
    shipment_table,
    shipment_to_row,
)
from tradelane.domain.importing.columns import SPEC_BY_FIELD
from tradelane.domain.importing.registry import CanonicalRegistry
from tradelane.domain.model import NameField

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from sqlalchemy.orm import Session

    from tradelane.domain.model import Shipment

# Keeps IN (...) lists well below SQLite's bound-parameter limit.
_KEY_CHUNK_SIZE: Final[int] = 500

log = logging.getLogger(__name__)


def is_empty_value(name: str, value: object) -> bool:
    if value is None or value == "":
        return True
    return name == "teu" and value == 0


def merge_values(stored: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Return the columns of ``incoming`` that should overwrite ``stored``.

    Empty incoming values (``None``, ``""``, a zero TEU) keep what is on file.
    """

    changes: dict[str, Any] = {}
    for name in SHIPMENT_VALUE_COLUMNS:
        value = incoming.get(name)
        if is_empty_value(name, value) or stored.get(name) == value:
            continue
        changes[name] = value
    return changes


class SqlAlchemyShipmentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def existing_keys(self) -> frozenset[str]:
        stmt = select(shipment_table.c.house_bol_number)
        return frozenset(self.session.execute(stmt).scalars())

    def canonical_registry(self) -> CanonicalRegistry:
        names: dict[NameField, list[str]] = {}
        for name_field in NameField:
            column = shipment_table.c[name_field.value]
            stmt = select(column).where(column.is_not(None)).distinct()
            placeholder = SPEC_BY_FIELD[name_field.value].default
            names[name_field] = [
                value for value in self.session.execute(stmt).scalars() if value != placeholder
            ]
        return CanonicalRegistry.from_values(names, self.existing_keys())

    def get(self, key: str) -> Shipment | None:
        stmt = select(shipment_table).where(shipment_table.c.house_bol_number == key)
        row = self.session.execute(stmt).mappings().one_or_none()
        return shipment_from_row(row) if row is not None else None

    def upsert_many(self, shipments: Sequence[Shipment]) -> None:
        """Insert new shipments and merge the non-empty values of known ones."""

        if not shipments:
            return
        now = datetime.now(UTC)
        incoming = {shipment.house_bol_number: shipment_to_row(shipment) for shipment in shipments}
        stored = self._rows_by_key(list(incoming))

        inserts: list[dict[str, Any]] = []
        updated = 0
        for key, row in incoming.items():
            current = stored.get(key)
            if current is None:
                inserts.append({**row, "imported_at": now, "updated_at": now})
                continue
            changes = merge_values(current, row)
            if not changes:
                continue
            self.session.execute(
                update(shipment_table)
                .where(shipment_table.c.house_bol_number == key)
                .values(**changes, updated_at=now)
            )
            updated += 1

        if inserts:
            self.session.execute(insert(shipment_table), inserts)
        log.info("Upserted shipments: %s inserted, %s updated", len(inserts), updated)

    def _rows_by_key(self, keys: list[str]) -> dict[str, Mapping[str, Any]]:
        rows: dict[str, Mapping[str, Any]] = {}
        for chunk in _chunks(keys, _KEY_CHUNK_SIZE):
            stmt = select(shipment_table).where(shipment_table.c.house_bol_number.in_(chunk))
            for row in self.session.execute(stmt).mappings():
                rows[row["house_bol_number"]] = row
        return rows


def _chunks(items: list[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]
