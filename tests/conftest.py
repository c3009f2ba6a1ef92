from __future__ import annotations

import os
from datetime import date
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from tradelane.adapters.sqlalchemy import create_all_tables
from tradelane.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    shutdown,
    startup,
)
from tradelane.domain.importing import CandidateRecord
from tradelane.domain.model import Shipment

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

FIXED_TODAY = date(2024, 7, 1)

SAMPLE_CSV = (
    "House BOL Number,Shipper Name,Consignee Name,Consignee City,Arrival Date,TEU\n"
    "HBL-200001,Acme Global Logistics,Walmart DC #405,Los Angeles,2024-06-01,2\n"
    "HBL-200002,Blue Ocean Trading,Target Stores,Chicago,06/15/2024,1.5\n"
)


def make_shipment(**overrides: Any) -> Shipment:
    values: dict[str, Any] = {
        "house_bol_number": "HBL-100000",
        "shipper_name": "Acme Global Logistics",
        "consignee_name": "Walmart DC #405",
        "consignee_city": "Los Angeles",
        "consignee_address": "123 Industrial Blvd",
        "notify_party": None,
        "place_of_receipt": "Shanghai",
        "us_arrival_port": "Long Beach",
        "arrival_date": date(2024, 6, 1),
        "teu": 2.0,
        "nvocc_name": "Expeditors",
        "vocc_code": "MAEU",
        "vocc_name": "Maersk Line",
    }
    values.update(overrides)
    return Shipment(**values)


def make_record(
    line_number: int = 2,
    *,
    defaulted: frozenset[str] = frozenset(),
    **overrides: Any,
) -> CandidateRecord:
    return CandidateRecord(
        shipment=make_shipment(**overrides),
        line_number=line_number,
        defaulted_fields=defaulted,
    )


@pytest.fixture
def shipment_factory() -> Callable[..., Shipment]:
    return make_shipment


@pytest.fixture
def record_factory() -> Callable[..., CandidateRecord]:
    return make_record


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyImportUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyImportUnitOfWork:
        return SqlAlchemyImportUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
