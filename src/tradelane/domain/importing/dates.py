"""Arrival date normalization."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Final

_TEXTUAL_FORMATS: Final[tuple[str, ...]] = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%d-%b-%Y",
)
_MONTH_FIRST_SEPARATORS = re.compile(r"[/-]")


@dataclass(frozen=True, slots=True)
class NormalizedDate:
    value: date
    fell_back: bool = False


def normalize_date(raw: str, *, today: date) -> NormalizedDate:
    """Return ``raw`` as a date, substituting ``today`` when nothing parses.

    Callers decide how to report the fallback; ``fell_back`` marks it.
    """

    parsed = parse_date(raw)
    if parsed is None:
        return NormalizedDate(value=today, fell_back=True)
    return NormalizedDate(value=parsed)


def parse_date(raw: str) -> date | None:
    text = raw.strip()
    if not text:
        return None
    return _parse_native(text) or _parse_month_first(text)


def _parse_native(text: str) -> date | None:
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _TEXTUAL_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    return None


def _parse_month_first(text: str) -> date | None:
    """Parse ``MM/DD/YYYY`` and ``MM-DD-YYYY`` (two-digit years are 20xx)."""

    parts = _MONTH_FIRST_SEPARATORS.split(text)
    if len(parts) != 3:
        return None
    try:
        month, day, year = (int(part) for part in parts)
    except ValueError:
        return None
    if year < 100:
        year += 2000
    try:
        return date(year, month, day)
    except ValueError:
        return None
