from __future__ import annotations

import json
from pathlib import Path

import pytest

from expensegen.ingest.snapshot import (
    PageSession,
    SnapshotPageSession,
    dump_raw_table,
    load_raw_table,
)

from tests.helpers.statements import row, statement_table

FIXTURE = Path(__file__).resolve().parent / "data" / "statement_snapshot.json"


def test_load_fixture_snapshot():
    table = load_raw_table(FIXTURE)

    assert len(table.rows) == 4
    assert table.rows[0].cells[0] == "Date"
    assert table.rows[1].cells[4] == "1,234.50"
    # Row text is trimmed on load, internal spacing untouched.
    assert table.rows[1].original_row_text == (
        "01/04/24UPI-XYZ-STORE-XYZSTORE@YBL000040921234567801/04/241,234.5045,678.90"
    )


def test_dumped_snapshot_loads_back(tmp_path: Path):
    table = statement_table(row("01/04/2024", "UPI-ONE", withdrawal="1.00", balance="9.00"))

    path = dump_raw_table(table, tmp_path / "snapshots" / "run.json", source="test")

    assert load_raw_table(path) == table
    assert json.loads(path.read_text(encoding="utf-8"))["source"] == "test"
    assert not path.with_name("run.json.tmp").exists()


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        json.dumps({"schema_version": 2, "rows": []}),
        json.dumps({"schema_version": 1, "rows": [{"cells": ["a"], "text": "a", "html": ""}]}),
        json.dumps({"schema_version": 1, "rows": [{"cells": [1, 2], "text": "12"}]}),
        json.dumps({"schema_version": 1}),
    ],
)
def test_invalid_snapshot_is_value_error(tmp_path: Path, payload: str):
    path = tmp_path / "bad.json"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ValueError, match="invalid raw-table snapshot"):
        load_raw_table(path)


def test_snapshot_page_session_satisfies_protocol():
    session = SnapshotPageSession(FIXTURE)

    assert isinstance(session, PageSession)
    assert session.extract_raw_table() == load_raw_table(FIXTURE)
