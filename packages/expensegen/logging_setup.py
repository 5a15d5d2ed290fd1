"""Logging for ``expensegen`` runs.

The pipeline reports through the ``expensegen`` logger tree: a skipped
checksum is logged at INFO by ``expensegen.persistence``, batch and
extraction summaries at INFO, lookup details at DEBUG.

``configure_logging`` is called once by the CLI and attaches the only
handler. Library modules call ``get_logger("expensegen.<module>")`` and stay
silent (``NullHandler``) when a host application embeds the pipeline without
configuring anything.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "expensegen"
_LEVEL_ENV = "EXPENSEGEN_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def resolve_level(level: int | str | None = None) -> int:
    """Return a numeric level for ``level``, or for ``EXPENSEGEN_LOG_LEVEL``.

    Accepts numbers, numeric strings and level names in any case. Unknown
    names fall back to ``INFO``.
    """

    if level is None:
        level = os.getenv(_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    return numeric if numeric is not None else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] = sys.stderr,
) -> None:
    """Send ``expensegen`` records to ``stream``; later calls are no-ops."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Records stop here; the root logger would print them twice.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
