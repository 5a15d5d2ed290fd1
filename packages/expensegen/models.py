"""Data models for ``expensegen``.

The pipeline moves a statement through three shapes:

- :class:`RawTable` / :class:`RawRow`: cell text exactly as rendered, handed
  over by a page session.
- :class:`CandidateTransaction`: a parsed row that still carries its rendered
  text, before a checksum is attached.
- :class:`Transaction`: the persisted entity, identified by ``checksum``.

Snapshot DTOs (pydantic) describe the on-disk JSON form of a raw table.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Raw table structure (page-session boundary)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawRow:
    """One rendered table row.

    ``cells`` are the per-column texts in document order; ``original_row_text``
    is the text of the whole row, which is what the checksum is computed from.
    """

    cells: tuple[str, ...]
    original_row_text: str


@dataclass(frozen=True, slots=True)
class RawTable:
    """A rendered transaction table. ``rows[0]`` is the header row."""

    rows: tuple[RawRow, ...]

    @classmethod
    def from_cells(cls, rows: Sequence[Sequence[str]]) -> RawTable:
        """Build a table from bare cell lists, deriving each row's text.

        The derived text concatenates the cells the way a rendered row's text
        content does, trimmed at both ends.
        """

        return cls(
            rows=tuple(
                RawRow(cells=tuple(cells), original_row_text="".join(cells).strip())
                for cells in rows
            )
        )


# ---------------------------------------------------------------------------
# Parsed and persisted transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CandidateTransaction:
    """A parsed-but-not-yet-deduplicated statement row."""

    date: int
    description: str
    amount: float
    is_debit: bool
    closing_balance: float
    original_row_text: str


@dataclass(frozen=True, slots=True)
class Transaction:
    """A statement row ready to persist.

    Attributes
    ----------
    date:
        Transaction date as epoch milliseconds.
    description:
        Narration text as rendered.
    amount:
        Non-negative magnitude; the direction lives in ``is_debit``.
    is_debit:
        True when the withdrawal column was populated.
    closing_balance:
        Running balance after the transaction.
    checksum:
        Hex digest of the row's rendered text; the dedup key.
    """

    date: int
    description: str
    amount: float
    is_debit: bool
    closing_balance: float
    checksum: str


@dataclass(frozen=True, slots=True)
class IngestReport:
    """Outcome of one batch: checksums inserted and skipped, in batch order."""

    inserted: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


# ---------------------------------------------------------------------------
# DTOs for raw-table snapshot I/O
# ---------------------------------------------------------------------------

SNAPSHOT_SCHEMA_VERSION: int = 1


class SnapshotRow(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    cells: list[str]
    text: str

    @field_validator("text")
    @classmethod
    def _trim_text(cls, v: str) -> str:
        # Rendered row text is always compared in its trimmed form.
        return v.strip()


class RawTableSnapshot(BaseModel):
    """Top-level schema for a raw-table snapshot JSON file."""

    model_config = ConfigDict(strict=True, extra="forbid")

    schema_version: int
    source: str | None = None
    rows: list[SnapshotRow]

    @field_validator("schema_version")
    @classmethod
    def _supported_version(cls, v: int) -> int:
        if v != SNAPSHOT_SCHEMA_VERSION:
            raise ValueError(
                f"unsupported snapshot schema_version {v}; expected {SNAPSHOT_SCHEMA_VERSION}"
            )
        return v

    def to_raw_table(self) -> RawTable:
        return RawTable(
            rows=tuple(
                RawRow(cells=tuple(r.cells), original_row_text=r.text) for r in self.rows
            )
        )

    @classmethod
    def from_raw_table(cls, table: RawTable, *, source: str | None = None) -> RawTableSnapshot:
        return cls(
            schema_version=SNAPSHOT_SCHEMA_VERSION,
            source=source,
            rows=[
                SnapshotRow(cells=list(r.cells), text=r.original_row_text) for r in table.rows
            ],
        )


__all__ = [
    "CandidateTransaction",
    "IngestReport",
    "RawRow",
    "RawTable",
    "RawTableSnapshot",
    "SNAPSHOT_SCHEMA_VERSION",
    "SnapshotRow",
    "Transaction",
]
