"""initial annual quota schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "quota_plan",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("plan_name", sa.String(length=255), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("quota_vacation_day", sa.Numeric(precision=6, scale=2), nullable=False),
        sa.Column("quota_medical_expense_baht", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "plan_name", "year", name="uq_quota_plan_company_name_year"),
    )
    op.create_index("ix_quota_plan_company_id", "quota_plan", ["company_id"])
    op.create_index("ix_quota_plan_year", "quota_plan", ["year"])

    op.create_table(
        "annual_record",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("quota_plan_id", sa.Uuid(), nullable=True),
        sa.Column("state", sa.String(length=50), nullable=False),
        sa.Column("rollover_vacation_day", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("worked_on_holiday_day", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("worked_day", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("used_vacation_day", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("used_sick_leave_day", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("used_medical_expense_baht", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.ForeignKeyConstraint(["quota_plan_id"], ["quota_plan.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "employee_id", "year", name="uq_annual_record_employee_year"),
    )
    op.create_index("ix_annual_record_company_id", "annual_record", ["company_id"])
    op.create_index("ix_annual_record_employee_id", "annual_record", ["employee_id"])
    op.create_index("ix_annual_record_year", "annual_record", ["year"])
    op.create_index("ix_annual_record_quota_plan_id", "annual_record", ["quota_plan_id"])

    op.create_table(
        "usage_ledger_entry",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("entry_type", sa.String(length=50), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("receipt_name", sa.String(length=255), nullable=True),
        sa.Column("note", sa.String(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_usage_ledger_entry_company_id", "usage_ledger_entry", ["company_id"])
    op.create_index("ix_usage_ledger_entry_employee_id", "usage_ledger_entry", ["employee_id"])
    op.create_index("ix_usage_ledger_entry_entry_type", "usage_ledger_entry", ["entry_type"])
    op.create_index(
        "ix_usage_ledger_employee_date", "usage_ledger_entry", ["company_id", "employee_id", "entry_date"]
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_company_created", "audit_log", ["company_id", "created_at"])
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("usage_ledger_entry")
    op.drop_table("annual_record")
    op.drop_table("quota_plan")
