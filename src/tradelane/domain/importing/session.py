"""Import session state machine.

``upload -> parsed -> review | complete``. A batch without conflicts is committed as
soon as it is staged; otherwise it waits in ``review`` until ``finalize``.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING

from tradelane.domain.model import NameField

from .errors import ImportInProgressError, InvalidImportStageError
from .ledger import ConflictLedger, Resolution
from .matching import DEFAULT_THRESHOLD
from .outcome import ImportMessage, ImportOutcome, MessageLevel
from .parser import parse_shipments
from .pipeline import ImportContext, stage_import

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from tradelane.domain.model import Shipment
    from tradelane.domain.ports import CsvSource

    from .ledger import ConflictEntry
    from .parser import ParseResult
    from .pipeline import ImportBatch
    from .registry import CanonicalRegistry

type RegistryLoader = Callable[[], CanonicalRegistry]
type Committer = Callable[[Sequence[Shipment]], None]

log = logging.getLogger(__name__)


class ImportStage(StrEnum):
    UPLOAD = "upload"
    PARSED = "parsed"
    REVIEW = "review"
    COMPLETE = "complete"


class ImportSession:
    """Drives one upload at a time from raw text to committed shipments."""

    def __init__(
        self,
        *,
        load_registry: RegistryLoader,
        commit: Committer,
        fields: Sequence[NameField] = tuple(NameField),
        threshold: int = DEFAULT_THRESHOLD,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._load_registry = load_registry
        self._commit = commit
        self._fields = tuple(fields)
        self._threshold = threshold
        self._today = today
        self._lock = threading.Lock()
        self._stage = ImportStage.UPLOAD
        self._parsed: ParseResult | None = None
        self._batch: ImportBatch | None = None
        self._outcome: ImportOutcome | None = None

    @property
    def stage(self) -> ImportStage:
        return self._stage

    @property
    def outcome(self) -> ImportOutcome | None:
        return self._outcome

    @property
    def ledger(self) -> ConflictLedger:
        if self._batch is None:
            return ConflictLedger()
        return self._batch.ledger

    @property
    def conflicts(self) -> list[ConflictEntry]:
        return self.ledger.entries

    def stage_text(self, text: str) -> ImportOutcome:
        """Parse, deduplicate and match ``text``; commit right away if nothing is flagged."""

        return self._stage_with(lambda: text)

    def stage_source(self, source: CsvSource) -> ImportOutcome:
        """Like ``stage_text`` but reads the content from ``source`` first."""

        def read() -> str:
            document = source.read()
            log.info("Staging CSV import from %s", document.name)
            return document.text

        return self._stage_with(read)

    def resolve(self, entry_id: str, resolution: Resolution) -> ConflictEntry:
        with self._exclusive():
            self._require(ImportStage.REVIEW, action="resolve")
            return self.ledger.resolve(entry_id, resolution)

    def resolve_all(self, resolution: Resolution) -> None:
        with self._exclusive():
            self._require(ImportStage.REVIEW, action="resolve")
            self.ledger.resolve_all(resolution)

    def finalize(self) -> ImportOutcome:
        """Apply the chosen resolutions and commit the staged batch."""

        with self._exclusive():
            self._require(ImportStage.REVIEW, action="finalize")
            return self._commit_batch()

    def cancel(self) -> None:
        """Discard the staged batch without committing anything."""

        with self._exclusive():
            if self._stage not in (ImportStage.PARSED, ImportStage.REVIEW):
                raise InvalidImportStageError(f"Cannot cancel an import in stage {self._stage}")
            log.info("Import cancelled")
            self._clear()

    def reset(self) -> None:
        """Start over after a completed import."""

        with self._exclusive():
            self._require(ImportStage.COMPLETE, action="reset")
            self._clear()

    def _stage_with(self, read: Callable[[], str]) -> ImportOutcome:
        with self._exclusive():
            self._require(ImportStage.UPLOAD, action="stage")
            try:
                parsed = parse_shipments(read(), today=self._today())
                self._parsed = parsed
                self._stage = ImportStage.PARSED
                context = ImportContext(
                    registry=self._load_registry(),
                    fields=self._fields,
                    threshold=self._threshold,
                )
                self._batch = stage_import(parsed, context=context)
                if self._batch.ledger:
                    self._stage = ImportStage.REVIEW
                    self._outcome = self._summarize(added=0)
                    log.info(
                        "Import staged for review: %s conflicts on %s records",
                        len(self._batch.ledger),
                        len(self._batch.flagged),
                    )
                    return self._outcome
                return self._commit_batch()
            except Exception:
                self._clear()
                raise

    def _commit_batch(self) -> ImportOutcome:
        assert self._batch is not None and self._batch.accepted is not None
        shipments = self._batch.ledger.finalize(
            [record.shipment for record in self._batch.accepted]
        )
        if shipments:
            self._commit(shipments)
        self._stage = ImportStage.COMPLETE
        self._outcome = self._summarize(added=len(shipments))
        self._outcome.messages.append(
            ImportMessage(level=MessageLevel.SUCCESS, text=f"Imported {len(shipments)} records.")
        )
        log.info("Import complete: %s", self._outcome.as_stats())
        return self._outcome

    def _summarize(self, *, added: int) -> ImportOutcome:
        assert self._batch is not None and self._parsed is not None
        return ImportOutcome(
            added=added,
            rejected=len(self._batch.rejected),
            flagged=len(self._batch.flagged),
            skipped=self._parsed.skipped_rows,
            conflicts=len(self._batch.ledger),
            messages=list(self._batch.messages),
        )

    def _require(self, stage: ImportStage, *, action: str) -> None:
        if self._stage is not stage:
            raise InvalidImportStageError(
                f"Cannot {action} an import in stage {self._stage}; expected {stage}"
            )

    def _clear(self) -> None:
        self._stage = ImportStage.UPLOAD
        self._parsed = None
        self._batch = None
        self._outcome = None

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise ImportInProgressError("Another import is already running")
        try:
            yield
        finally:
            self._lock.release()
