# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from annual_quota.models.enums import RecordState


class CreateAnnualRecordRequest(BaseModel):
    """Onboard an employee: open their record for a year with no carry-over.

    When quota_plan_id is omitted the most recent plan applicable to the year is used.
    """

    employee_id: uuid.UUID
    year: int = Field(ge=1900, le=9999)
    quota_plan_id: uuid.UUID | None = None


class UpdateAnnualRecordRequest(BaseModel):
    """Admin correction of the non-derived fields of a record.

    Usage counters only change through the ledger.
    """

    quota_plan_id: uuid.UUID | None = None
    rollover_vacation_day: Decimal | None = Field(default=None, max_digits=8, decimal_places=2)


class AnnualRecordResponse(BaseModel):
    """Response schema for an annual record."""

    id: uuid.UUID
    company_id: uuid.UUID
    employee_id: uuid.UUID
    year: int
    quota_plan_id: uuid.UUID | None
    state: RecordState
    rollover_vacation_day: Decimal
    worked_on_holiday_day: Decimal
    worked_day: Decimal
    used_vacation_day: Decimal
    used_sick_leave_day: Decimal
    used_medical_expense_baht: Decimal
    version: int
    created_at: datetime
    updated_at: datetime


class AnnualRecordListResponse(BaseModel):
    """Paginated list of annual records."""

    items: list[AnnualRecordResponse]
    total: int


class ResyncYearResponse(BaseModel):
    """Result of recomputing every record of a year from the ledger."""

    year: int
    resynced: int
