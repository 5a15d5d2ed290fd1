"""SQLAlchemy engine/session helpers for the expensegen store.

Usage
-----
from db.client import create_store_engine, resolve_database_url, session_scope

engine = create_store_engine(resolve_database_url())
try:
    with session_scope(engine) as s:
        s.execute(...)
finally:
    engine.dispose()

The engine is created per run and passed explicitly; nothing here keeps a
process-wide handle.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def sqlite_url(db_file: str | os.PathLike[str]) -> str:
    """Return a SQLAlchemy URL for a SQLite file path."""

    return f"sqlite+pysqlite:///{Path(db_file).expanduser()}"


def resolve_database_url(override: str | None = None) -> str:
    """Resolve the store location.

    Precedence: explicit ``override``, then ``DATABASE_URL``, then
    ``DB_LOCATION`` (a SQLite file path).
    """

    url = override or os.getenv("DATABASE_URL")
    if url:
        return url
    location = os.getenv("DB_LOCATION")
    if location and location.strip():
        return sqlite_url(location.strip())
    raise RuntimeError(
        "Neither DATABASE_URL nor DB_LOCATION is set; cannot locate the transaction store"
    )


def create_store_engine(database_url: str) -> Engine:
    """Create a fresh engine for ``database_url``; the caller owns disposal."""

    # Default isolation level is fine; echo disabled.
    return create_engine(database_url, pool_pre_ping=True)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "create_store_engine",
    "resolve_database_url",
    "session_scope",
    "sqlite_url",
]
