"""Primary-key duplicate filter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .parser import CandidateRecord

log = logging.getLogger(__name__)


@dataclass(slots=True)
class DuplicateFilterResult:
    accepted: list[CandidateRecord] = field(default_factory=list["CandidateRecord"])
    rejected: list[CandidateRecord] = field(default_factory=list["CandidateRecord"])


def filter_duplicates(
    records: Iterable[CandidateRecord],
    existing_keys: Iterable[str],
) -> DuplicateFilterResult:
    """Partition ``records`` by whether their House BOL number is already taken.

    A key is taken when it exists on file or was accepted earlier in the same batch.
    Order within both partitions follows the input.
    """

    taken = set(existing_keys)
    result = DuplicateFilterResult()
    for record in records:
        if record.key in taken:
            log.debug("Rejecting duplicate key %s (line %s)", record.key, record.line_number)
            result.rejected.append(record)
            continue
        taken.add(record.key)
        result.accepted.append(record)
    return result
