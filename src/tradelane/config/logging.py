"""Logging setup shared by the CLI and long-running sync loops."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "TRADELANE_LOG_LEVEL"


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the level
    defaults to ``TRADELANE_LOG_LEVEL`` (falling back to INFO) and the format is terse
    enough for CLI output. Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=level if level is not None else _level_from_environment(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def _level_from_environment() -> int:
    name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(name)
    return level if level is not None else logging.INFO
