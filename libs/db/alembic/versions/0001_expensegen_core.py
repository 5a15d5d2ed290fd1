# ruff: noqa: I001
"""Statement ledger table and date index.

Revision ID: 0001_expensegen_core
Revises: None
Create Date: 2026-10-18
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_expensegen_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # if_not_exists: stores bootstrapped by `expensegen init-db` already carry
    # this exact layout and must upgrade cleanly.
    op.create_table(
        "expensegen",
        sa.Column("date", sa.BigInteger(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("amount", sa.Float(), nullable=True),
        sa.Column("is_debit", sa.Integer(), nullable=True),
        sa.Column("closing_balance", sa.Float(), nullable=True),
        sa.Column("checksum", sa.Text(), nullable=True),
        if_not_exists=True,
    )
    op.create_index(
        "expensegen_date_ind",
        "expensegen",
        ["date"],
        unique=False,
        if_not_exists=True,
    )


def downgrade() -> None:
    op.drop_index("expensegen_date_ind", table_name="expensegen")
    op.drop_table("expensegen")
