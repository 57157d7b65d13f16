# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from annual_quota.models.base import TimestampMixin, UUIDBase


class CompanyHoliday(UUIDBase, TimestampMixin, table=True):
    """A company day off. Only work logged on one of these earns vacation credit."""

    __tablename__ = "company_holiday"
    __table_args__ = (sa.UniqueConstraint("company_id", "date", name="uq_company_holiday_date"),)

    company_id: uuid.UUID = Field(index=True)
    date: datetime.date
    name: str = Field(max_length=255)
