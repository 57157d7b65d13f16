# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class RemainingVacationResponse(BaseModel):
    """Signed remaining vacation days; negative means over-used."""

    employee_id: uuid.UUID
    as_of: date
    remaining_vacation_day: Decimal


class RemainingMedicalResponse(BaseModel):
    """Signed remaining medical budget; negative means over budget."""

    employee_id: uuid.UUID
    as_of: date
    remaining_medical_expense_baht: Decimal


class QuotaSnapshotResponse(BaseModel):
    """Point-in-time entitlement for one employee with every input shown."""

    employee_id: uuid.UUID
    year: int
    as_of: date
    days_elapsed: int
    days_in_year: int
    quota_plan_id: uuid.UUID
    quota_vacation_day: Decimal
    quota_medical_expense_baht: Decimal
    pro_rated_vacation_day: Decimal
    pro_rated_medical_expense_baht: Decimal
    rollover_vacation_day: Decimal
    worked_on_holiday_day: Decimal
    used_vacation_day: Decimal
    used_sick_leave_day: Decimal
    used_medical_expense_baht: Decimal
    remaining_vacation_day: Decimal
    remaining_medical_expense_baht: Decimal
