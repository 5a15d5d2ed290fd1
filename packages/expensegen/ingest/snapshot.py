"""Page-session boundary and raw-table snapshots.

The pipeline never drives a browser. Whatever logs in and navigates to the
statement page is modelled as a :class:`PageSession` that hands over the
rendered table once it is stable. :class:`SnapshotPageSession` plays that
role from a JSON snapshot on disk, which is how the CLI and the tests feed
the pipeline.

Snapshot layout::

    {"schema_version": 1, "source": "...", "rows": [{"cells": [...], "text": "..."}]}

Atomicity: writes target ``.tmp`` first and then ``os.replace`` into place.
"""

from __future__ import annotations

import json
import os
from os import PathLike
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from ..logging_setup import get_logger
from ..models import RawTable, RawTableSnapshot

_logger = get_logger("expensegen.ingest.snapshot")


@runtime_checkable
class PageSession(Protocol):
    """Collaborator that has located and stabilized the transaction table."""

    def extract_raw_table(self) -> RawTable: ...


def load_raw_table(path: str | PathLike[str]) -> RawTable:
    """Read and validate a snapshot file.

    Raises ``ValueError`` when the file is not valid JSON or does not match
    the snapshot schema; ``OSError`` propagates for unreadable files.
    """

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    try:
        snapshot = RawTableSnapshot.model_validate_json(text)
    except ValidationError as e:
        raise ValueError(f"invalid raw-table snapshot {p}: {e}") from e
    _logger.debug(
        "Loaded snapshot %s with %d rows (source=%s)", p, len(snapshot.rows), snapshot.source
    )
    return snapshot.to_raw_table()


def dump_raw_table(
    table: RawTable,
    path: str | PathLike[str],
    *,
    source: str | None = None,
) -> Path:
    """Write ``table`` as a snapshot file and return its path."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = RawTableSnapshot.from_raw_table(table, source=source).model_dump(mode="json")
    tmp = p.with_name(p.name + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")
    os.replace(tmp, p)
    return p


class SnapshotPageSession:
    """A :class:`PageSession` that replays a table captured to disk."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)

    def extract_raw_table(self) -> RawTable:
        return load_raw_table(self.path)


__all__ = [
    "PageSession",
    "SnapshotPageSession",
    "dump_raw_table",
    "load_raw_table",
]
