# ruff: noqa: I001
"""
Alembic configuration for the `db` library.

This file injects the database URL at runtime (``DATABASE_URL``, else a
SQLite file from ``DB_LOCATION``, else ``sqlalchemy.url`` from the INI) and
supports both offline and online migrations.
"""

from __future__ import annotations

import os
import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from dotenv import load_dotenv, find_dotenv

# Alembic Config object, which provides access to the values within
# the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Load environment from a workspace-level .env if present.
#
# `find_dotenv(usecwd=True)` discovers `/repo/.env` both when Alembic runs
# from the repo root and from inside libs/db.
dotenv_path = find_dotenv(usecwd=True)
if dotenv_path:
    load_dotenv(dotenv_path=dotenv_path, override=False)

logger = logging.getLogger("alembic.env")

# Import target metadata and URL resolution from the shared db package. This
# requires libs/db/src to be importable (installed, or via prepend_sys_path).
import db as _db_pkg  # noqa: E402
from db.client import resolve_database_url  # noqa: E402

target_metadata = _db_pkg.metadata

# Env wins over the INI value.
if os.getenv("DATABASE_URL") or os.getenv("DB_LOCATION"):
    db_url = resolve_database_url()
else:
    db_url_maybe = config.get_main_option("sqlalchemy.url")
    if not db_url_maybe:
        raise RuntimeError(
            "No database configured. Set DATABASE_URL or DB_LOCATION, or set "
            "'sqlalchemy.url' in alembic.ini."
        )
    db_url = db_url_maybe

config.set_main_option("sqlalchemy.url", db_url)
# Also set the option on the INI section so `engine_from_config` sees it.
config.set_section_option(config.config_ini_section, "sqlalchemy.url", db_url)
logger.info("Running migrations against %s", db_url.split("@")[-1])


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = db_url
    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
