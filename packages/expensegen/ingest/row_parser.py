"""Parse one rendered statement row into a candidate transaction.

Column layout of the statement table (0-based):

``0`` date, ``1`` narration, ``2`` cheque/reference number, ``3`` value date,
``4`` withdrawal amount, ``5`` deposit amount, ``6`` closing balance.

Columns 2 and 3 are not used.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, tzinfo
from decimal import Decimal

from ..errors import ParseError
from ..models import CandidateTransaction, RawRow

# Day-first formats used by the statement; tried in order.
DATE_FORMATS: tuple[str, ...] = ("%d/%m/%Y", "%d/%m/%y")

DATE_COL = 0
DESCRIPTION_COL = 1
DEBIT_COL = 4
CREDIT_COL = 5
BALANCE_COL = 6
MIN_CELLS = BALANCE_COL + 1

# Plain decimal notation; ``1e3`` and ``1_000`` are not statement amounts.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)


def parse_amount(raw: str, *, column: str = "amount") -> float:
    """Parse a comma-grouped decimal such as ``"1,234.50"``.

    Every ``,`` is stripped before parsing. Empty, non-numeric and non-finite
    values raise :class:`ParseError`, as does Python number syntax that
    :class:`~decimal.Decimal` would accept (exponents, digit-group
    underscores). Nothing is coerced to zero.
    """

    text = raw.strip().replace(",", "")
    if not text:
        raise ParseError(f"{column} is empty", column=column, value=raw)
    if not _DECIMAL_RE.fullmatch(text):
        raise ParseError(f"{column} is not a decimal number: {raw!r}", column=column, value=raw)
    return float(Decimal(text))


def parse_statement_date(
    raw: str,
    *,
    date_formats: tuple[str, ...] = DATE_FORMATS,
    tz: tzinfo = UTC,
) -> int:
    """Return epoch milliseconds for midnight of the statement date in ``tz``."""

    s = raw.strip()
    for fmt in date_formats:
        try:
            parsed = datetime.strptime(s, fmt)
        except ValueError:
            continue
        return int(parsed.replace(tzinfo=tz).timestamp()) * 1000
    raise ParseError(
        f"date {raw!r} does not match any of {', '.join(date_formats)}",
        column="date",
        value=raw,
    )


def parse_row(
    row: RawRow,
    *,
    date_formats: tuple[str, ...] = DATE_FORMATS,
    tz: tzinfo = UTC,
) -> CandidateTransaction:
    """Convert one :class:`RawRow` into a :class:`CandidateTransaction`.

    Direction comes from the withdrawal column alone: it is a debit when that
    cell is non-blank. The amount is read from the withdrawal column when it
    is non-blank and from the deposit column otherwise.
    """

    cells = row.cells
    if len(cells) < MIN_CELLS:
        raise ParseError(
            f"expected at least {MIN_CELLS} cells, got {len(cells)}",
            column="cells",
            value=row.original_row_text,
        )

    is_debit = cells[DEBIT_COL].strip() != ""
    amount_column = "withdrawal" if is_debit else "deposit"
    amount_raw = cells[DEBIT_COL] if is_debit else cells[CREDIT_COL]
    amount = parse_amount(amount_raw, column=amount_column)
    if amount < 0:
        raise ParseError(
            f"{amount_column} must not be negative: {amount_raw!r}",
            column=amount_column,
            value=amount_raw,
        )

    return CandidateTransaction(
        date=parse_statement_date(cells[DATE_COL], date_formats=date_formats, tz=tz),
        description=cells[DESCRIPTION_COL],
        amount=amount,
        is_debit=is_debit,
        closing_balance=parse_amount(cells[BALANCE_COL], column="closing_balance"),
        original_row_text=row.original_row_text,
    )


__all__ = [
    "DATE_FORMATS",
    "parse_amount",
    "parse_row",
    "parse_statement_date",
]
