"""Application orchestration entry points."""

from __future__ import annotations

import hashlib
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from tradelane.adapters.drive import DriveClient
from tradelane.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    is_started,
    startup,
)
from tradelane.config import get_import_config
from tradelane.domain.importing import (
    CsvImportError,
    ImportSession,
    ImportStage,
    Resolution,
    render_template,
)
from tradelane.domain.ports.unit_of_work import ImportUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from tradelane.adapters.drive import DriveFile
    from tradelane.config import ImportConfig
    from tradelane.domain.importing import CanonicalRegistry, ImportOutcome
    from tradelane.domain.model import Shipment
    from tradelane.domain.ports import CsvSource

UnitOfWorkFactory = Callable[[], ImportUnitOfWork]

log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyImportUnitOfWork


def create_import_session(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ImportConfig | None = None,
) -> ImportSession:
    """Build an import session wired to the configured persistence adapter."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_config = config or get_import_config()

    def load_registry() -> CanonicalRegistry:
        with effective_uow() as uow:
            return uow.repositories.shipments.canonical_registry()

    def commit(shipments: Sequence[Shipment]) -> None:
        with effective_uow() as uow:
            uow.repositories.shipments.upsert_many(shipments)
            uow.commit()

    return ImportSession(
        load_registry=load_registry,
        commit=commit,
        fields=effective_config.name_fields,
        threshold=effective_config.fuzzy_threshold,
    )


def stage_csv_import(source: CsvSource, *, session: ImportSession) -> ImportOutcome:
    """Stage ``source`` in ``session``; batches without conflicts are committed directly."""

    outcome = session.stage_source(source)
    log.info(
        "Staged import: added=%s, rejected=%s, flagged=%s, skipped=%s, conflicts=%s",
        outcome.added,
        outcome.rejected,
        outcome.flagged,
        outcome.skipped,
        outcome.conflicts,
    )
    return outcome


def finalize_import(
    session: ImportSession,
    *,
    resolution: Resolution | None = None,
) -> ImportOutcome:
    """Commit a staged batch, optionally applying ``resolution`` to every conflict first."""

    if resolution is not None:
        session.resolve_all(resolution)
    return session.finalize()


def import_csv(
    source: CsvSource,
    *,
    resolution: Resolution = Resolution.USE_SUGGESTION,
    session: ImportSession | None = None,
) -> ImportOutcome:
    """Stage and, if needed, finalize ``source`` in one go with a blanket resolution."""

    active = session or create_import_session()
    outcome = stage_csv_import(source, session=active)
    if active.stage is ImportStage.REVIEW:
        outcome = finalize_import(active, resolution=resolution)
    return outcome


def list_drive_files(*, client: DriveClient | None = None) -> list[DriveFile]:
    return (client or DriveClient()).list_csv_files()


def write_template(path: Path | None = None) -> str:
    """Return the CSV template text, also writing it to ``path`` when given."""

    text = render_template()
    if path is not None:
        path.write_text(text, encoding="utf-8")
        log.info("Wrote CSV template to %s", path)
    return text


@dataclass(slots=True)
class ContinuousSync:
    """Re-imports a CSV source on a fixed interval.

    Ticks never overlap: a tick that starts while another is running is skipped. A tick
    whose content is byte-identical to the last imported content does nothing.
    """

    source: CsvSource
    session: ImportSession
    resolution: Resolution = Resolution.USE_SUGGESTION
    interval_seconds: float = 300.0
    sleep: Callable[[float], None] = time.sleep
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _last_digest: str | None = field(default=None, init=False)

    def tick(self) -> ImportOutcome | None:
        if not self._lock.acquire(blocking=False):
            log.warning("Previous sync tick still running; skipping")
            return None
        try:
            return self._run_tick()
        finally:
            self._lock.release()

    def run(self, *, max_ticks: int | None = None) -> list[ImportOutcome]:
        """Run ticks until ``max_ticks`` is reached (forever when None)."""

        outcomes: list[ImportOutcome] = []
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            if ticks:
                self.sleep(self.interval_seconds)
            ticks += 1
            try:
                outcome = self.tick()
            except CsvImportError:
                log.exception("Sync tick %s failed", ticks)
                continue
            if outcome is not None:
                outcomes.append(outcome)
        return outcomes

    def _run_tick(self) -> ImportOutcome | None:
        document = self.source.read()
        digest = hashlib.sha256(document.text.encode("utf-8")).hexdigest()
        if digest == self._last_digest:
            log.info("Source %s unchanged since last sync; skipping", document.name)
            return None

        outcome = self.session.stage_text(document.text)
        if self.session.stage is ImportStage.REVIEW:
            try:
                outcome = finalize_import(self.session, resolution=self.resolution)
            except Exception:
                # unattended: drop the batch so the next tick can stage again
                self.session.cancel()
                raise
        self.session.reset()
        self._last_digest = digest
        return outcome
