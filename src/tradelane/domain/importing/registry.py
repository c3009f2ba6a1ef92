"""Canonical name registry used by the fuzzy matcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from tradelane.domain.model import NameField


@dataclass(frozen=True, slots=True)
class CanonicalRegistry:
    """Names and keys already on file.

    The registry is read-only during a matching pass. Names introduced by earlier rows
    of the same batch live in a ``WorkingRegistry`` created by ``working_copy``.
    """

    names: Mapping[NameField, frozenset[str]] = field(default_factory=dict)
    keys: frozenset[str] = frozenset()

    @classmethod
    def from_values(
        cls,
        names: Mapping[NameField, Iterable[str | None]],
        keys: Iterable[str] = (),
    ) -> CanonicalRegistry:
        cleaned = {
            name_field: frozenset(value.strip() for value in values if value and value.strip())
            for name_field, values in names.items()
        }
        return cls(names=cleaned, keys=frozenset(keys))

    def values_for(self, name_field: NameField) -> frozenset[str]:
        return self.names.get(name_field, frozenset())

    def contains(self, name_field: NameField, value: str) -> bool:
        folded = value.casefold()
        return any(candidate.casefold() == folded for candidate in self.values_for(name_field))

    def working_copy(self) -> WorkingRegistry:
        working = WorkingRegistry()
        for name_field, values in self.names.items():
            for value in values:
                working.add(name_field, value)
        return working


@dataclass(slots=True)
class WorkingRegistry:
    """Growable per-pass registry; insertion order is kept for stable candidate lists."""

    _values: dict[NameField, dict[str, str]] = field(
        default_factory=dict["NameField", dict[str, str]]
    )

    def add(self, name_field: NameField, value: str) -> bool:
        """Add ``value``; return False when a case-insensitive equal is already present."""

        bucket = self._values.setdefault(name_field, {})
        folded = value.casefold()
        if folded in bucket:
            return False
        bucket[folded] = value
        return True

    def candidates(self, name_field: NameField) -> list[str]:
        return list(self._values.get(name_field, {}).values())
