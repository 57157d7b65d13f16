# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from annual_quota.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from annual_quota.models.enums import RecordState


class AnnualRecord(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """Per-employee, per-year opening balances and usage counters.

    Usage counters are a cache of the usage ledger and are only ever written
    by a full recompute under a row lock.
    """

    __tablename__ = "annual_record"
    __table_args__ = (sa.UniqueConstraint("company_id", "employee_id", "year", name="uq_annual_record_employee_year"),)

    company_id: uuid.UUID = Field(index=True)
    employee_id: uuid.UUID = Field(index=True)
    year: int = Field(index=True)
    quota_plan_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("quota_plan.id", ondelete="RESTRICT"), nullable=True, index=True),
    )
    state: str = Field(default=RecordState.BOOTSTRAPPED, max_length=50)
    rollover_vacation_day: Decimal = Field(default=Decimal(0), max_digits=8, decimal_places=2)
    worked_on_holiday_day: Decimal = Field(default=Decimal(0), max_digits=8, decimal_places=2)
    worked_day: Decimal = Field(default=Decimal(0), max_digits=8, decimal_places=2)
    used_vacation_day: Decimal = Field(default=Decimal(0), max_digits=8, decimal_places=2)
    used_sick_leave_day: Decimal = Field(default=Decimal(0), max_digits=8, decimal_places=2)
    used_medical_expense_baht: Decimal = Field(default=Decimal(0), max_digits=12, decimal_places=2)
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
