from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy.engine import Engine

from expensegen.errors import ParseError, SchemaError
from expensegen.ingest.checksum import compute_checksum
from expensegen.ingest.snapshot import SnapshotPageSession
from expensegen.models import RawTable
from expensegen.pipeline import ingest_table, run_ingestion

from tests.helpers.db import count_rows, stored_rows
from tests.helpers.statements import row, statement_table

FIXTURE = Path(__file__).resolve().parent / "data" / "statement_snapshot.json"


class _FixedPageSession:
    """Page session that hands over a prepared table."""

    def __init__(self, table: RawTable) -> None:
        self.table = table
        self.calls = 0

    def extract_raw_table(self) -> RawTable:
        self.calls += 1
        return self.table


def test_run_ingestion_from_snapshot(db_url: str):
    report = run_ingestion(SnapshotPageSession(FIXTURE), database_url=db_url)

    assert report.inserted_count == 3
    rows = stored_rows(db_url)
    assert [r["description"] for r in rows] == [
        "UPI-XYZ-STORE-XYZSTORE@YBL",
        "NEFT CR-ACME PAYROLL-APRIL",
        "ATW-512967XXXXXX1234-S1ANMU17",
    ]
    assert [r["is_debit"] for r in rows] == [1, 0, 1]
    assert [r["closing_balance"] for r in rows] == [45678.90, 130678.90, 120678.90]
    assert rows[0]["checksum"] == compute_checksum(
        "01/04/24UPI-XYZ-STORE-XYZSTORE@YBL000040921234567801/04/241,234.5045,678.90"
    )


def test_rerun_is_idempotent(db_url: str):
    run_ingestion(SnapshotPageSession(FIXTURE), database_url=db_url)
    before = stored_rows(db_url)

    report = run_ingestion(SnapshotPageSession(FIXTURE), database_url=db_url)

    assert report.inserted_count == 0
    assert report.skipped_count == 3
    assert stored_rows(db_url) == before


def test_overlapping_runs_add_only_new_rows(db_url: str):
    first = statement_table(
        row("01/04/2024", "UPI-ONE", withdrawal="100.00", balance="900.00"),
        row("02/04/2024", "UPI-TWO", withdrawal="50.00", balance="850.00"),
    )
    second = statement_table(
        row("02/04/2024", "UPI-TWO", withdrawal="50.00", balance="850.00"),
        row("03/04/2024", "SALARY", deposit="1,000.00", balance="1,850.00"),
    )

    run_ingestion(_FixedPageSession(first), database_url=db_url)
    report = run_ingestion(_FixedPageSession(second), database_url=db_url)

    assert report.inserted_count == 1
    assert report.skipped_count == 1
    assert [r["description"] for r in stored_rows(db_url)] == ["UPI-ONE", "UPI-TWO", "SALARY"]


def test_malformed_row_leaves_store_untouched(db_url: str):
    table = statement_table(
        row("01/04/2024", "UPI-ONE", withdrawal="100.00", balance="900.00"),
        row("02/04/2024", "UPI-TWO", withdrawal="50.00", balance="abc"),
    )

    with pytest.raises(ParseError):
        run_ingestion(_FixedPageSession(table), database_url=db_url)

    assert count_rows(db_url) == 0


def test_page_session_called_once(db_url: str):
    session = _FixedPageSession(statement_table())

    report = run_ingestion(session, database_url=db_url)

    assert session.calls == 1
    assert report.inserted_count == report.skipped_count == 0


def test_store_location_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_file = tmp_path / "from-env.db"
    monkeypatch.setenv("DB_LOCATION", str(db_file))

    report = run_ingestion(SnapshotPageSession(FIXTURE))

    assert report.inserted_count == 3
    assert db_file.is_file()


def test_missing_store_configuration_is_runtime_error():
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        run_ingestion(SnapshotPageSession(FIXTURE))


def test_malformed_database_url_is_schema_error():
    with pytest.raises(SchemaError):
        run_ingestion(SnapshotPageSession(FIXTURE), database_url="not a url")


def test_ingest_table_with_existing_engine(engine: Engine, db_url: str):
    table = statement_table(row("01/04/2024", "UPI-ONE", withdrawal="1.00", balance="9.00"))

    assert ingest_table(table, engine=engine).inserted_count == 1
    assert ingest_table(table, engine=engine).skipped_count == 1
    assert count_rows(db_url) == 1
