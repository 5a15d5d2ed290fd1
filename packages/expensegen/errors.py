"""Exception taxonomy for the ingestion pipeline.

Every error raised by the core derives from :class:`ExpensegenError` so
callers (the CLI, host applications) can report failures uniformly. None of
these are retried inside the core.
"""

from __future__ import annotations


class ExpensegenError(Exception):
    """Base class for ingestion failures."""


class ParseError(ExpensegenError, ValueError):
    """A row cell cannot be converted to the required type.

    ``row_number`` is the 1-based position among the table's data rows (the
    header excluded) and is filled in by the table extractor.
    """

    def __init__(
        self,
        message: str,
        *,
        column: str | None = None,
        value: str | None = None,
        row_number: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.column = column
        self.value = value
        self.row_number = row_number

    def __str__(self) -> str:
        if self.row_number is None:
            return self.message
        return f"data row {self.row_number}: {self.message}"


class SchemaError(ExpensegenError):
    """The store cannot be prepared (unwritable location, bad URL, ...)."""


class ExistenceQueryError(ExpensegenError):
    """The checksum lookup failed; the batch was aborted with no inserts."""


class InsertError(ExpensegenError):
    """Writing the batch failed; the whole batch is rolled back.

    ``checksum`` names the row whose insert failed, or is ``None`` when the
    commit itself failed.
    """

    def __init__(self, message: str, *, checksum: str | None) -> None:
        super().__init__(message)
        self.checksum = checksum


__all__ = [
    "ExpensegenError",
    "ExistenceQueryError",
    "InsertError",
    "ParseError",
    "SchemaError",
]
