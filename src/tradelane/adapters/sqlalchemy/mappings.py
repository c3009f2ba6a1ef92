"""SQLAlchemy table metadata for shipments."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Dialect,
    Float,
    Index,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

from tradelane.domain.model import Shipment

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

shipment_table = Table(
    "shipment",
    metadata,
    Column("house_bol_number", String(64), primary_key=True),
    Column("shipper_name", String(255), nullable=False),
    Column("consignee_name", String(255), nullable=False),
    Column("consignee_city", String(128), nullable=False),
    Column("consignee_address", String(255), nullable=False, default=""),
    Column("notify_party", String(255), nullable=True),
    Column("place_of_receipt", String(128), nullable=False),
    Column("us_arrival_port", String(128), nullable=False),
    Column("arrival_date", Date, nullable=False),
    Column("teu", Float, nullable=False, default=0.0),
    Column("nvocc_name", String(255), nullable=False),
    Column("vocc_code", String(16), nullable=False, default=""),
    Column("vocc_name", String(255), nullable=False),
    Column("imported_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_shipment_shipper_name", "shipper_name"),
    Index("ix_shipment_consignee_name", "consignee_name"),
)

SHIPMENT_VALUE_COLUMNS: tuple[str, ...] = (
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


def shipment_to_row(shipment: Shipment) -> dict[str, Any]:
    row: dict[str, Any] = {"house_bol_number": shipment.house_bol_number}
    for name in SHIPMENT_VALUE_COLUMNS:
        row[name] = getattr(shipment, name)
    return row


def shipment_from_row(row: Mapping[str, Any]) -> Shipment:
    arrival = row["arrival_date"]
    if isinstance(arrival, datetime):
        arrival = arrival.date()
    elif not isinstance(arrival, date):
        arrival = date.fromisoformat(str(arrival))
    return Shipment(
        house_bol_number=row["house_bol_number"],
        shipper_name=row["shipper_name"],
        consignee_name=row["consignee_name"],
        consignee_city=row["consignee_city"],
        consignee_address=row["consignee_address"] or "",
        notify_party=row["notify_party"],
        place_of_receipt=row["place_of_receipt"],
        us_arrival_port=row["us_arrival_port"],
        arrival_date=arrival,
        teu=float(row["teu"] or 0.0),
        nvocc_name=row["nvocc_name"],
        vocc_code=row["vocc_code"] or "",
        vocc_name=row["vocc_name"],
    )


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the shipment metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
