"""Drive the row parser over every data row of a rendered table."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, tzinfo

from ..errors import ParseError
from ..models import CandidateTransaction, RawRow, RawTable
from .row_parser import DATE_FORMATS, parse_row


def iter_data_rows(table: RawTable) -> Iterator[RawRow]:
    """Yield rows in document order, skipping exactly the header row."""

    rows = iter(table.rows)
    next(rows, None)
    yield from rows


class TableExtractor:
    """Lazy, restartable sequence of candidates parsed from ``table``.

    Each call to ``iter()`` starts again from the first data row. A row that
    fails to parse raises :class:`ParseError` with ``row_number`` set.
    """

    def __init__(
        self,
        table: RawTable,
        *,
        date_formats: tuple[str, ...] = DATE_FORMATS,
        tz: tzinfo = UTC,
    ) -> None:
        self._table = table
        self._date_formats = date_formats
        self._tz = tz

    def __iter__(self) -> Iterator[CandidateTransaction]:
        for row_number, row in enumerate(iter_data_rows(self._table), start=1):
            try:
                yield parse_row(row, date_formats=self._date_formats, tz=self._tz)
            except ParseError as e:
                e.row_number = row_number
                raise

    def __len__(self) -> int:
        return max(len(self._table.rows) - 1, 0)


def extract_candidates(
    table: RawTable,
    *,
    date_formats: tuple[str, ...] = DATE_FORMATS,
    tz: tzinfo = UTC,
) -> list[CandidateTransaction]:
    """Parse the whole table or nothing.

    The batch is materialized before it is returned, so a failing row aborts
    the extraction without handing back any partial candidates.
    """

    return list(TableExtractor(table, date_formats=date_formats, tz=tz))


__all__ = [
    "TableExtractor",
    "extract_candidates",
    "iter_data_rows",
]
