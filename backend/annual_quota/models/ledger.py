# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from annual_quota.models.base import TimestampMixin, UUIDBase


class UsageLedgerEntry(UUIDBase, TimestampMixin, table=True):
    """One leave day, worked day or medical expense.

    The owning annual record is implied by (company_id, employee_id, entry_date.year).
    """

    __tablename__ = "usage_ledger_entry"
    __table_args__ = (sa.Index("ix_usage_ledger_employee_date", "company_id", "employee_id", "entry_date"),)

    company_id: uuid.UUID = Field(index=True)
    employee_id: uuid.UUID = Field(index=True)
    entry_type: str = Field(max_length=50, index=True)
    entry_date: date
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    receipt_name: str | None = Field(default=None, max_length=255)
    note: str | None = None
    created_by: uuid.UUID
