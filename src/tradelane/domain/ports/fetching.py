"""Ports for fetching CSV content."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class CsvDocument:
    """Raw CSV text plus where it came from."""

    name: str
    text: str


@runtime_checkable
class CsvSource(Protocol):
    """Anything that can hand over the current CSV content in one read."""

    def read(self) -> CsvDocument: ...


__all__ = ["CsvDocument", "CsvSource"]
