# ruff: noqa: I001
"""CLI for the ``expensegen`` package.

A thin Typer entry point around :mod:`expensegen.pipeline`. Environment
variables (``DATABASE_URL`` / ``DB_LOCATION``, ``EXPENSEGEN_TIMEZONE``,
``EXPENSEGEN_LOG_LEVEL``) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. Each invocation performs at most
one ingestion run.
"""

from __future__ import annotations

import os
import sys
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from .errors import ExpensegenError
from .logging_setup import configure_logging


def _resolve_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA zone name, honoring ``EXPENSEGEN_TIMEZONE`` when omitted."""

    zone = (name or os.getenv("EXPENSEGEN_TIMEZONE") or "UTC").strip()
    if zone.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise typer.BadParameter(f"unknown timezone: {zone}") from e


def _fail(message: str) -> typer.Exit:
    print(f"Error: {message}", file=sys.stderr)
    return typer.Exit(1)


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Ingest bank-statement transaction tables into a local store without "
        "duplicates. Loads DATABASE_URL / DB_LOCATION from a local .env."
    ),
)


# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect this when used in `Annotated` below.
SNAPSHOT_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--snapshot",
    help="Path to a raw-table snapshot JSON captured from the statement page",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler reports nice errors
    readable=True,
)


@app.command("init-db")
def init_db_cmd(
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL / DB_LOCATION (falls back to env vars)."
    ),
) -> None:
    """Create the transaction table and its date index when absent."""

    from .persistence import ensure_schema, open_store

    try:
        with open_store(database_url=database_url) as engine:
            ensure_schema(engine)
    except (ExpensegenError, RuntimeError) as e:
        raise _fail(str(e)) from e

    Console().print("Transaction store is ready.")


@app.command("ingest")
def ingest_cmd(
    snapshot: Annotated[Path, SNAPSHOT_OPTION],
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL / DB_LOCATION (falls back to env vars)."
    ),
    timezone: str | None = typer.Option(
        None, help="IANA zone for statement dates (falls back to EXPENSEGEN_TIMEZONE, then UTC)."
    ),
) -> None:
    """Ingest one statement table snapshot."""

    from .ingest.snapshot import SnapshotPageSession
    from .pipeline import run_ingestion

    tz = _resolve_timezone(timezone)
    if not snapshot.is_file():
        raise _fail(f"File not found: {snapshot}")

    try:
        report = run_ingestion(SnapshotPageSession(snapshot), database_url=database_url, tz=tz)
    except (ExpensegenError, RuntimeError) as e:
        raise _fail(str(e)) from e
    except ValueError as e:
        raise _fail(f"Failed to read snapshot: {e}") from e
    except OSError as e:
        raise _fail(f"Failed to read '{snapshot}': {e}") from e

    Console().print(
        f"Inserted [bold]{report.inserted_count}[/bold] new transactions, "
        f"skipped [bold]{report.skipped_count}[/bold] already stored."
    )


@app.command("show")
def show_cmd(
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL / DB_LOCATION (falls back to env vars)."
    ),
    limit: int = typer.Option(20, min=1, help="Number of transactions to show."),
    timezone: str | None = typer.Option(None, help="IANA zone used to render dates."),
) -> None:
    """Show the most recent stored transactions."""

    from .persistence import ensure_schema, open_store, recent_transactions

    tz = _resolve_timezone(timezone)
    try:
        with open_store(database_url=database_url) as engine:
            ensure_schema(engine)
            rows = recent_transactions(engine, limit=limit)
    except (ExpensegenError, RuntimeError) as e:
        raise _fail(str(e)) from e

    table = Table(title=f"Latest {len(rows)} transactions")
    table.add_column("Date")
    table.add_column("Description", overflow="fold")
    table.add_column("Debit", justify="right")
    table.add_column("Credit", justify="right")
    table.add_column("Balance", justify="right")
    for tx in rows:
        amount = f"{tx.amount:,.2f}"
        table.add_row(
            datetime.fromtimestamp(tx.date / 1000, tz).date().isoformat(),
            tx.description.strip(),
            amount if tx.is_debit else "",
            "" if tx.is_debit else amount,
            f"{tx.closing_balance:,.2f}",
        )
    Console().print(table)


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging()

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


def main() -> None:  # pragma: no cover - console script shim
    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m expensegen.cli`
    app()
