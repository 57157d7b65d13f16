"""company holiday calendar

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-17 00:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "company_holiday",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "date", name="uq_company_holiday_date"),
    )
    op.create_index("ix_company_holiday_company_id", "company_holiday", ["company_id"])


def downgrade() -> None:
    op.drop_index("ix_company_holiday_company_id", table_name="company_holiday")
    op.drop_table("company_holiday")
