"""Phase-based staging of a parsed CSV batch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from tradelane.domain.model import NameField

from .deduplication import filter_duplicates
from .ledger import ConflictLedger
from .matching import DEFAULT_THRESHOLD, match_entities
from .outcome import ImportMessage, MessageLevel
from .registry import CanonicalRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .parser import CandidateRecord, ParseResult

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportContext:
    """Read-only inputs shared across phases."""

    registry: CanonicalRegistry = field(default_factory=CanonicalRegistry)
    fields: tuple[NameField, ...] = tuple(NameField)
    threshold: int = DEFAULT_THRESHOLD


@dataclass(slots=True)
class ImportBatch:
    """Records of one upload as they move through the phases."""

    records: list[CandidateRecord]
    accepted: list[CandidateRecord] | None = None
    rejected: list[CandidateRecord] = field(default_factory=list["CandidateRecord"])
    clean: list[CandidateRecord] = field(default_factory=list["CandidateRecord"])
    flagged: list[CandidateRecord] = field(default_factory=list["CandidateRecord"])
    ledger: ConflictLedger = field(default_factory=ConflictLedger)
    messages: list[ImportMessage] = field(default_factory=list[ImportMessage])

    def note(self, level: MessageLevel, text: str) -> None:
        self.messages.append(ImportMessage(level=level, text=text))


class ImportPhase(Protocol):
    name: str

    def run(self, batch: ImportBatch, *, context: ImportContext) -> None: ...


class DeduplicationPhase(ImportPhase):
    """Rejects records whose key exists on file or earlier in the batch."""

    name: str = "deduplication"

    def run(self, batch: ImportBatch, *, context: ImportContext) -> None:
        result = filter_duplicates(batch.records, context.registry.keys)
        batch.accepted = result.accepted
        batch.rejected = result.rejected
        for record in result.rejected:
            batch.note(
                MessageLevel.ERROR,
                f"REJECTED: Record with House BOL {record.key} already exists.",
            )


class MatchingPhase(ImportPhase):
    """Compares name fields of accepted records against the registry."""

    name: str = "matching"

    def run(self, batch: ImportBatch, *, context: ImportContext) -> None:
        if batch.accepted is None:
            raise RuntimeError("Deduplication must run before matching")

        result = match_entities(batch.accepted, context.registry, context.fields, context.threshold)
        batch.clean = result.clean
        batch.flagged = result.flagged
        batch.ledger = ConflictLedger(result.entries)
        flagged_keys = {record.key for record in result.flagged}
        for record in batch.accepted:
            if record.key in flagged_keys:
                batch.note(
                    MessageLevel.INFO,
                    f"House BOL {record.key} flagged for data quality review.",
                )
            else:
                batch.note(MessageLevel.SUCCESS, f"House BOL {record.key} ready for import.")


@dataclass(slots=True)
class ImportPipeline:
    """Runs the configured phases in order against one batch."""

    phases: Sequence[ImportPhase] = field(default_factory=tuple)

    def with_phase(self, phase: ImportPhase) -> ImportPipeline:
        return ImportPipeline(phases=(*self.phases, phase))

    def extend(self, phases: Iterable[ImportPhase]) -> ImportPipeline:
        return ImportPipeline(phases=(*self.phases, *tuple(phases)))

    def run(self, batch: ImportBatch, *, context: ImportContext | None = None) -> ImportBatch:
        active_context = context or ImportContext()
        for phase in self.phases:
            log.debug("Running import phase %s", phase.name)
            phase.run(batch, context=active_context)
        return batch


def default_pipeline() -> ImportPipeline:
    return ImportPipeline(phases=(DeduplicationPhase(), MatchingPhase()))


def stage_import(parsed: ParseResult, *, context: ImportContext) -> ImportBatch:
    """Deduplicate and match ``parsed`` records, ready for review or commit."""

    batch = ImportBatch(records=list(parsed.records))
    for warning in parsed.warnings:
        batch.note(MessageLevel.INFO, warning.message)
    return default_pipeline().run(batch, context=context)
