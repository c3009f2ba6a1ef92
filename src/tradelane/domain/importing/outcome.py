"""Summary of an import run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class MessageLevel(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ImportMessage:
    level: MessageLevel
    text: str


@dataclass(slots=True)
class ImportOutcome:
    """Counters and per-record messages reported back to the user.

    ``flagged`` counts records with at least one conflict; ``conflicts`` counts the
    individual ledger entries.
    """

    added: int = 0
    rejected: int = 0
    flagged: int = 0
    skipped: int = 0
    conflicts: int = 0
    messages: list[ImportMessage] = field(default_factory=list[ImportMessage])

    def as_stats(self) -> dict[str, int]:
        return {"added": self.added, "rejected": self.rejected, "flagged": self.flagged}
