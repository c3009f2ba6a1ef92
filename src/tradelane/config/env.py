"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import InvalidSettingError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        raise MissingConfigurationError(missing)

    return values


def optional_env_var[T](name: str, default: T, *, parse: Callable[[str], T]) -> T:
    """Return ``parse(value)`` for a set variable, ``default`` when unset or blank."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise InvalidSettingError(name, raw, "cannot be parsed") from exc
