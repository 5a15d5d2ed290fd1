"""Content-derived dedup keys for statement rows.

The checksum is the MD5 hex digest of the row's rendered text, the same key
that stores written by earlier runs hold. Collisions between distinct rows of
one account's history are assumed negligible.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

from ..models import CandidateTransaction, Transaction


def compute_checksum(original_row_text: str) -> str:
    """Return the hex digest identifying a row's rendered text."""

    return hashlib.md5(original_row_text.encode("utf-8"), usedforsecurity=False).hexdigest()


def assign_checksums(candidates: Iterable[CandidateTransaction]) -> list[Transaction]:
    """Attach a checksum to each candidate, preserving order."""

    return [
        Transaction(
            date=c.date,
            description=c.description,
            amount=c.amount,
            is_debit=c.is_debit,
            closing_balance=c.closing_balance,
            checksum=compute_checksum(c.original_row_text),
        )
        for c in candidates
    ]


__all__ = ["assign_checksums", "compute_checksum"]
