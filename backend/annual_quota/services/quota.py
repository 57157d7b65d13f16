# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from annual_quota.exceptions import MissingQuotaPlanError, RecordNotFoundError
from annual_quota.models.annual_record import AnnualRecord
from annual_quota.models.quota_plan import QuotaPlan
from annual_quota.schemas.quota import (
    QuotaSnapshotResponse,
    RemainingMedicalResponse,
    RemainingVacationResponse,
)
from annual_quota.services import calculator

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def _load_record_with_plan(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    year: int,
) -> tuple[AnnualRecord, QuotaPlan]:
    """Read the record and the plan it references in one statement, without locks."""
    result = await session.execute(
        select(AnnualRecord, QuotaPlan)
        .outerjoin(QuotaPlan, col(AnnualRecord.quota_plan_id) == col(QuotaPlan.id))
        .where(
            col(AnnualRecord.company_id) == company_id,
            col(AnnualRecord.employee_id) == employee_id,
            col(AnnualRecord.year) == year,
        )
    )
    row = result.one_or_none()
    if row is None:
        raise RecordNotFoundError(employee_id, year)

    record, plan = row
    if plan is None:
        raise MissingQuotaPlanError(record.id, record.quota_plan_id)
    return record, plan


async def get_remaining_vacation(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    as_of: date,
) -> RemainingVacationResponse:
    record, plan = await _load_record_with_plan(session, company_id, employee_id, as_of.year)
    return RemainingVacationResponse(
        employee_id=employee_id,
        as_of=as_of,
        remaining_vacation_day=calculator.remaining_vacation(record, plan, as_of),
    )


async def get_remaining_medical(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    as_of: date,
) -> RemainingMedicalResponse:
    record, plan = await _load_record_with_plan(session, company_id, employee_id, as_of.year)
    return RemainingMedicalResponse(
        employee_id=employee_id,
        as_of=as_of,
        remaining_medical_expense_baht=calculator.remaining_medical(record, plan, as_of),
    )


async def get_quota_snapshot(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    as_of: date,
) -> QuotaSnapshotResponse:
    """Entitlement on ``as_of`` together with every input that produced it."""
    record, plan = await _load_record_with_plan(session, company_id, employee_id, as_of.year)
    return QuotaSnapshotResponse(
        employee_id=employee_id,
        year=record.year,
        as_of=as_of,
        days_elapsed=calculator.days_elapsed(as_of),
        days_in_year=calculator.days_in_year(as_of.year),
        quota_plan_id=plan.id,
        quota_vacation_day=plan.quota_vacation_day,
        quota_medical_expense_baht=plan.quota_medical_expense_baht,
        pro_rated_vacation_day=calculator.pro_rated(plan.quota_vacation_day, as_of),
        pro_rated_medical_expense_baht=calculator.pro_rated(plan.quota_medical_expense_baht, as_of),
        rollover_vacation_day=record.rollover_vacation_day,
        worked_on_holiday_day=record.worked_on_holiday_day,
        used_vacation_day=record.used_vacation_day,
        used_sick_leave_day=record.used_sick_leave_day,
        used_medical_expense_baht=record.used_medical_expense_baht,
        remaining_vacation_day=calculator.remaining_vacation(record, plan, as_of),
        remaining_medical_expense_baht=calculator.remaining_medical(record, plan, as_of),
    )
