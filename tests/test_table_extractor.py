from __future__ import annotations

import pytest

from expensegen.errors import ParseError
from expensegen.ingest.table_extractor import (
    TableExtractor,
    extract_candidates,
    iter_data_rows,
)
from expensegen.models import RawTable

from tests.helpers.statements import HEADER, row, statement_table


def _three_row_table(*, bad_balance_at: int | None = None) -> RawTable:
    rows = [
        row("01/04/2024", "UPI-ONE", withdrawal="100.00", balance="900.00"),
        row("02/04/2024", "UPI-TWO", deposit="50.00", balance="950.00"),
        row("03/04/2024", "UPI-THREE", withdrawal="25.00", balance="925.00"),
    ]
    if bad_balance_at is not None:
        rows[bad_balance_at][6] = "abc"
    return statement_table(*rows)


def test_header_row_is_skipped_and_order_preserved():
    candidates = extract_candidates(_three_row_table())

    assert [c.description for c in candidates] == ["UPI-ONE", "UPI-TWO", "UPI-THREE"]
    assert [c.is_debit for c in candidates] == [True, False, True]


def test_iter_data_rows_skips_exactly_one_row():
    table = _three_row_table()

    rows = list(iter_data_rows(table))

    assert len(rows) == 3
    assert rows[0] is table.rows[1]
    assert tuple(table.rows[0].cells) == HEADER


def test_extractor_is_restartable():
    extractor = TableExtractor(_three_row_table())

    first = list(extractor)
    second = list(extractor)

    assert first == second
    assert len(extractor) == 3


def test_extractor_is_lazy():
    extractor = TableExtractor(_three_row_table(bad_balance_at=2))
    it = iter(extractor)

    assert next(it).description == "UPI-ONE"
    assert next(it).description == "UPI-TWO"
    with pytest.raises(ParseError):
        next(it)


def test_malformed_row_aborts_whole_table():
    table = _three_row_table(bad_balance_at=1)

    with pytest.raises(ParseError) as ei:
        extract_candidates(table)

    assert ei.value.row_number == 2
    assert ei.value.column == "closing_balance"
    assert "data row 2" in str(ei.value)


@pytest.mark.parametrize("table", [RawTable(rows=()), statement_table()])
def test_table_without_data_rows(table: RawTable):
    assert extract_candidates(table) == []
    assert len(TableExtractor(table)) == 0
