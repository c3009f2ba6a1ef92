"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import CsvDocument, CsvSource
from .persistence import ShipmentRepository
from .unit_of_work import (
    ImportRepositories,
    ImportUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CsvDocument",
    "CsvSource",
    "ImportRepositories",
    "ImportUnitOfWork",
    "RepositoryCollection",
    "ShipmentRepository",
    "UnitOfWork",
]
