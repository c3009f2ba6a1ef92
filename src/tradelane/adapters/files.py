"""Local filesystem CSV source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tradelane.domain.importing.errors import TransportError
from tradelane.domain.ports.fetching import CsvDocument, CsvSource

log = logging.getLogger(__name__)


class LocalSourceError(TransportError):
    """Raised when a local CSV file cannot be read."""


@dataclass(frozen=True, slots=True)
class LocalCsvSource:
    path: Path
    encoding: str = "utf-8-sig"

    def read(self) -> CsvDocument:
        try:
            text = self.path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise LocalSourceError(f"Cannot read {self.path}: {exc}") from exc
        log.debug("Read %s characters from %s", len(text), self.path)
        return CsvDocument(name=self.path.name, text=text)


if TYPE_CHECKING:
    _source_check: CsvSource = LocalCsvSource(Path("shipments.csv"))
