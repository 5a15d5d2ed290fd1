"""Ingestion stages: row parsing, table extraction, checksums, snapshots."""

from .checksum import assign_checksums, compute_checksum
from .row_parser import DATE_FORMATS, parse_amount, parse_row, parse_statement_date
from .snapshot import PageSession, SnapshotPageSession, dump_raw_table, load_raw_table
from .table_extractor import TableExtractor, extract_candidates, iter_data_rows

__all__ = [
    "DATE_FORMATS",
    "PageSession",
    "SnapshotPageSession",
    "TableExtractor",
    "assign_checksums",
    "compute_checksum",
    "dump_raw_table",
    "extract_candidates",
    "iter_data_rows",
    "load_raw_table",
    "parse_amount",
    "parse_row",
    "parse_statement_date",
]
