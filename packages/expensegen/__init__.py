"""Public interface for the ``expensegen`` package.

Re-exports the pipeline entry points, the data models and the error
taxonomy as the stable import surface.
"""

from .errors import (
    ExistenceQueryError,
    ExpensegenError,
    InsertError,
    ParseError,
    SchemaError,
)
from .ingest import (
    PageSession,
    SnapshotPageSession,
    TableExtractor,
    assign_checksums,
    compute_checksum,
    extract_candidates,
    parse_row,
)
from .models import CandidateTransaction, IngestReport, RawRow, RawTable, Transaction
from .persistence import ensure_schema, ingest_batch, open_store
from .pipeline import ingest_table, run_ingestion

__all__ = [
    # Pipeline
    "ingest_table",
    "run_ingestion",
    # Stages
    "parse_row",
    "TableExtractor",
    "extract_candidates",
    "compute_checksum",
    "assign_checksums",
    "ensure_schema",
    "ingest_batch",
    "open_store",
    # Boundary
    "PageSession",
    "SnapshotPageSession",
    # Models
    "RawRow",
    "RawTable",
    "CandidateTransaction",
    "Transaction",
    "IngestReport",
    # Errors
    "ExpensegenError",
    "ParseError",
    "SchemaError",
    "ExistenceQueryError",
    "InsertError",
]
