# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from annual_quota.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase


class QuotaPlan(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """Yearly entitlement schedule. Frozen once an annual record points at it."""

    __tablename__ = "quota_plan"
    __table_args__ = (sa.UniqueConstraint("company_id", "plan_name", "year", name="uq_quota_plan_company_name_year"),)

    company_id: uuid.UUID = Field(index=True)
    plan_name: str = Field(max_length=255)
    year: int = Field(index=True)
    quota_vacation_day: Decimal = Field(default=Decimal(0), max_digits=6, decimal_places=2)
    quota_medical_expense_baht: Decimal = Field(default=Decimal(0), max_digits=12, decimal_places=2)
    created_by: uuid.UUID
