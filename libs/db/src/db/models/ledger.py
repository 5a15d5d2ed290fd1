from __future__ import annotations

from sqlalchemy import BigInteger, Column, Float, Index, Integer, Table, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: expensegen
# ---------------------------

# No primary key or unique constraint: the layout matches stores written by
# earlier runs. Checksum uniqueness is enforced by the dedup lookup at insert
# time (see ``expensegen.persistence``).
expensegen_table = Table(
    "expensegen",
    Base.metadata,
    # Epoch milliseconds; BIGINT keeps Postgres from overflowing a 32-bit int.
    Column("date", BigInteger),
    Column("description", Text),
    Column("amount", Float),
    # 0 or 1
    Column("is_debit", Integer),
    Column("closing_balance", Float),
    Column("checksum", Text),
    Index("expensegen_date_ind", "date"),
)


class ExpenseRecord(Base):
    """ORM view of one stored statement row.

    The mapper treats ``checksum`` as the identity even though the database
    declares no key for it.
    """

    __table__ = expensegen_table
    __mapper_args__ = {"primary_key": [expensegen_table.c.checksum]}


__all__ = [
    "Base",
    "ExpenseRecord",
    "expensegen_table",
]
