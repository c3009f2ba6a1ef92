"""SQLAlchemy adapter package for tradelane."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, shipment_table
from .repositories import SqlAlchemyShipmentRepository, merge_values
from .unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    StartupError,
    configured_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyImportUnitOfWork",
    "SqlAlchemyShipmentRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "merge_values",
    "metadata",
    "shipment_table",
    "shutdown",
    "startup",
]
