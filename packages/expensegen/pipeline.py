"""Ingestion pipeline: table extraction → checksums → idempotent store.

``ingest_table`` runs the three stages over one raw table against an engine
the caller already holds. ``run_ingestion`` is one complete run: it asks the
page session for the table, opens the store for the duration of the run,
prepares the schema and ingests the batch.
"""

from __future__ import annotations

from datetime import UTC, tzinfo

from sqlalchemy.engine import Engine

from .ingest.checksum import assign_checksums
from .ingest.row_parser import DATE_FORMATS
from .ingest.snapshot import PageSession
from .ingest.table_extractor import extract_candidates
from .logging_setup import get_logger
from .models import IngestReport, RawTable
from .persistence import ensure_schema, ingest_batch, open_store

_logger = get_logger("expensegen.pipeline")


def ingest_table(
    table: RawTable,
    *,
    engine: Engine,
    date_formats: tuple[str, ...] = DATE_FORMATS,
    tz: tzinfo = UTC,
) -> IngestReport:
    """Ingest every data row of ``table`` into the store behind ``engine``.

    Parsing happens before the store is touched: a :class:`ParseError` on any
    row leaves the store unchanged.
    """

    candidates = extract_candidates(table, date_formats=date_formats, tz=tz)
    transactions = assign_checksums(candidates)
    _logger.info("Extracted %d transactions from the statement table", len(transactions))
    if not transactions:
        return IngestReport()
    return ingest_batch(engine, transactions)


def run_ingestion(
    page_session: PageSession,
    *,
    database_url: str | None = None,
    date_formats: tuple[str, ...] = DATE_FORMATS,
    tz: tzinfo = UTC,
) -> IngestReport:
    """Perform one ingestion run.

    Parameters
    ----------
    page_session:
        Collaborator holding the stabilized statement table.
    database_url:
        Store location; falls back to ``DATABASE_URL`` / ``DB_LOCATION``.
    date_formats, tz:
        Statement date formats and the zone in which dates are interpreted.
    """

    table = page_session.extract_raw_table()
    with open_store(database_url=database_url) as engine:
        ensure_schema(engine)
        return ingest_table(table, engine=engine, date_formats=date_formats, tz=tz)


__all__ = ["ingest_table", "run_ingestion"]
