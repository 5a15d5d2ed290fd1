# ruff: noqa: I001
"""Persistence for ``expensegen``.

Functions here prepare the ``expensegen`` table and write statement rows to
it. They rely on the SQLAlchemy model in ``db.models.ledger`` and on engines
and sessions provided by ``db.client``.

Idempotency rules:
- A transaction is identified by its ``checksum`` alone.
- Before inserting, the batch's checksums are looked up; stored ones are
  skipped, as are repeats of a checksum earlier in the same batch.
- The lookup and the inserts share one session, so with
  :func:`ingest_batch` a batch is committed all-or-nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.client import create_store_engine, resolve_database_url, session_scope
from db.models.ledger import ExpenseRecord, expensegen_table

from .errors import ExistenceQueryError, InsertError, SchemaError
from .logging_setup import get_logger
from .models import IngestReport, Transaction

# SQLite builds before 3.32 cap bound parameters at 999 per statement.
_LOOKUP_CHUNK_SIZE = 500

_logger = get_logger("expensegen.persistence")


@contextmanager
def open_store(*, database_url: str | None = None) -> Iterator[Engine]:
    """Open the store for one run and dispose the engine on every exit path.

    The location resolves as in :func:`db.client.resolve_database_url`
    (``RuntimeError`` when none is configured). A location SQLAlchemy cannot
    open, such as a malformed URL or an unknown dialect, raises
    :class:`SchemaError`.
    """

    url = resolve_database_url(database_url)
    try:
        engine = create_store_engine(url)
    except SQLAlchemyError as e:
        raise SchemaError(f"cannot open the transaction store: {e}") from e
    try:
        yield engine
    finally:
        engine.dispose()


def ensure_schema(engine: Engine) -> None:
    """Create the ``expensegen`` table and its date index when absent.

    Safe to call on every run. Raises :class:`SchemaError` when the store
    cannot be prepared.
    """

    try:
        with engine.begin() as conn:
            expensegen_table.create(bind=conn, checkfirst=True)
            # A table created by other tooling may lack the index.
            for index in expensegen_table.indexes:
                index.create(bind=conn, checkfirst=True)
    except SQLAlchemyError as e:
        raise SchemaError(f"failed to prepare the transaction store: {e}") from e


def query_existing_checksums(session: Session, checksums: Iterable[str]) -> set[str]:
    """Return the subset of ``checksums`` already stored.

    Raises :class:`ExistenceQueryError` when the lookup fails.
    """

    unique = list(dict.fromkeys(checksums))
    found: set[str] = set()
    try:
        for start in range(0, len(unique), _LOOKUP_CHUNK_SIZE):
            chunk = unique[start : start + _LOOKUP_CHUNK_SIZE]
            stmt = select(ExpenseRecord.checksum).where(ExpenseRecord.checksum.in_(chunk))
            found.update(session.execute(stmt).scalars())
    except SQLAlchemyError as e:
        raise ExistenceQueryError(f"failed to look up existing checksums: {e}") from e
    return found


def _row_values(tx: Transaction) -> dict[str, Any]:
    return {
        "date": tx.date,
        "description": tx.description,
        "amount": tx.amount,
        "is_debit": 1 if tx.is_debit else 0,
        "closing_balance": tx.closing_balance,
        "checksum": tx.checksum,
    }


def _insert_row(session: Session, tx: Transaction) -> None:
    session.execute(insert(ExpenseRecord).values(**_row_values(tx)))


def insert_new_transactions(
    session: Session,
    transactions: Sequence[Transaction],
) -> IngestReport:
    """Insert the transactions whose checksum is not stored yet.

    The caller owns the transaction boundary (commit/rollback). Raises
    :class:`ExistenceQueryError` before anything is written when the lookup
    fails, and :class:`InsertError` for the first row that cannot be written.
    """

    existing = query_existing_checksums(session, (tx.checksum for tx in transactions))
    _logger.debug(
        "Batch of %d transactions; %d checksums already stored",
        len(transactions),
        len(existing),
    )

    seen: set[str] = set(existing)
    inserted: list[str] = []
    skipped: list[str] = []
    for tx in transactions:
        if tx.checksum in seen:
            _logger.info("Data with checksum %s already exists, skipping", tx.checksum)
            skipped.append(tx.checksum)
            continue
        try:
            _insert_row(session, tx)
        except SQLAlchemyError as e:
            raise InsertError(
                f"failed to insert transaction {tx.checksum}: {e}", checksum=tx.checksum
            ) from e
        seen.add(tx.checksum)
        inserted.append(tx.checksum)

    return IngestReport(inserted=tuple(inserted), skipped=tuple(skipped))


def ingest_batch(engine: Engine, transactions: Sequence[Transaction]) -> IngestReport:
    """Persist one batch atomically: every new row is committed, or none is.

    A failing commit (for example a locked database) raises
    :class:`InsertError` without a checksum; the batch is rolled back.
    """

    try:
        with session_scope(engine) as session:
            report = insert_new_transactions(session, transactions)
    except SQLAlchemyError as e:
        # Lookup and insert failures arrive already translated.
        raise InsertError(f"failed to commit the batch: {e}", checksum=None) from e
    _logger.info(
        "Ingested batch: %d inserted, %d skipped",
        report.inserted_count,
        report.skipped_count,
    )
    return report


def recent_transactions(engine: Engine, *, limit: int = 20) -> list[Transaction]:
    """Return up to ``limit`` stored transactions, newest date first."""

    stmt = (
        select(expensegen_table)
        .order_by(expensegen_table.c.date.desc())
        .limit(limit)
    )
    with session_scope(engine) as session:
        rows = session.execute(stmt).all()
    return [
        Transaction(
            date=row.date,
            description=row.description,
            amount=row.amount,
            is_debit=bool(row.is_debit),
            closing_balance=row.closing_balance,
            checksum=row.checksum,
        )
        for row in rows
    ]


__all__ = [
    "ensure_schema",
    "ingest_batch",
    "insert_new_transactions",
    "open_store",
    "query_existing_checksums",
    "recent_transactions",
]
