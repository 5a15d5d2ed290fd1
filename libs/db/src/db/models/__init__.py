"""Shared SQLAlchemy models registry for the expensegen store.

Currently includes the statement ledger used by ``expensegen``.
"""

from .ledger import Base, ExpenseRecord, expensegen_table

__all__ = [
    "Base",
    "ExpenseRecord",
    "expensegen_table",
]
