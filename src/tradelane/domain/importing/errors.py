"""Failure taxonomy for CSV imports.

Structural and transport errors abort the current import attempt. Row skips,
duplicate rejections and fuzzy-match flags are classification outcomes and are
reported through warnings and outcome messages instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class CsvImportError(Exception):
    """Base class for import failures surfaced to the user."""


class StructuralError(CsvImportError):
    """The uploaded text cannot be interpreted as a shipment table."""


class EmptyInputError(StructuralError):
    """Raised when the input has no header line plus at least one data line."""

    def __init__(self) -> None:
        super().__init__("CSV input needs a header row and at least one data row")


class MissingRequiredColumnsError(StructuralError):
    """Raised when mandatory columns cannot be located in the header row."""

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(f"Missing required columns: {', '.join(self.fields)}")


class TransportError(CsvImportError):
    """Raised when CSV content could not be fetched from its source."""


class InvalidImportStageError(CsvImportError):
    """Raised when an import session action does not fit its current stage."""


class ImportInProgressError(CsvImportError):
    """Raised when an import is started while another one is still running."""


class UnknownConflictError(LookupError):
    """Raised when a resolution targets a conflict entry that does not exist."""

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Unknown conflict entry: {entry_id}")
