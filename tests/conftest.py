"""Pytest configuration for test isolation.

The application resolves its store from ``DATABASE_URL`` / ``DB_LOCATION``
and reads ``EXPENSEGEN_TIMEZONE`` and ``EXPENSEGEN_LOG_LEVEL``. A developer's
shell (or a ``.env`` loaded by an earlier CLI test) must not leak into tests,
so every test starts from a clean environment and a scratch working
directory, and gets its own SQLite file.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine

from db.client import create_store_engine

from tests.helpers.db import bootstrap_sqlite_db

_ENV_VARS = ("DATABASE_URL", "DB_LOCATION", "EXPENSEGEN_TIMEZONE", "EXPENSEGEN_LOG_LEVEL")


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield
    # The CLI loads .env into os.environ directly; drop whatever it added.
    for name in _ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite store with the schema already created."""

    return bootstrap_sqlite_db(tmp_path / "expensegen.db")


@pytest.fixture
def engine(db_url: str) -> Iterator[Engine]:
    eng = create_store_engine(db_url)
    try:
        yield eng
    finally:
        eng.dispose()
