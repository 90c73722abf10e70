"""Idempotent stderr logging setup for the sysobs logger tree."""

from __future__ import annotations

import logging
import os
import sys

_CONFIGURED = False

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level name, number or SYSOBS_LOG_LEVEL into a logging level."""
    if level is None:
        level = os.environ.get("SYSOBS_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str | None = None) -> None:
    """Attach a stderr handler to the ``sysobs`` logger. Safe to call repeatedly.

    MCP stdio transport owns stdout, so log output always goes to stderr.
    """
    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("sysobs")
    logger.setLevel(resolve_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True
