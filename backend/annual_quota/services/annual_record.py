"""Annual record lifecycle: onboarding, admin corrections and ledger resync.

Every usage counter on an AnnualRecord is a cache of the usage ledger. The
only writer is ``recompute_counters``, which re-sums the ledger for the
record's (employee, year) while the caller holds the record's row lock.
"""

# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from annual_quota.exceptions import AppError, RecordNotFoundError
from annual_quota.models.annual_record import AnnualRecord
from annual_quota.models.enums import AuditAction, AuditEntityType, LedgerEntryType, RecordState
from annual_quota.models.ledger import UsageLedgerEntry
from annual_quota.schemas.annual_record import (
    AnnualRecordListResponse,
    AnnualRecordResponse,
    ResyncYearResponse,
)
from annual_quota.schemas.quota_plan import AssignQuotaPlanResponse
from annual_quota.services.audit import model_to_audit_dict, write_audit_log
from annual_quota.services.employee import get_employee_service
from annual_quota.services.quota_plan import get_quota_plan, most_recent_applicable_plan

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from annual_quota.schemas.annual_record import CreateAnnualRecordRequest, UpdateAnnualRecordRequest
    from annual_quota.schemas.auth import AuthContext

# counter -> ledger entry types summed into it
COUNTER_SOURCES: dict[str, tuple[LedgerEntryType, ...]] = {
    "used_vacation_day": (LedgerEntryType.VACATION,),
    "used_sick_leave_day": (LedgerEntryType.SICK,),
    "worked_on_holiday_day": (LedgerEntryType.HOLIDAY_WORK,),
    "worked_day": (LedgerEntryType.WORK, LedgerEntryType.HOLIDAY_WORK),
    "used_medical_expense_baht": (LedgerEntryType.MEDICAL_EXPENSE,),
}


def build_annual_record_response(record: AnnualRecord) -> AnnualRecordResponse:
    return AnnualRecordResponse(
        id=record.id,
        company_id=record.company_id,
        employee_id=record.employee_id,
        year=record.year,
        quota_plan_id=record.quota_plan_id,
        state=RecordState(record.state),
        rollover_vacation_day=record.rollover_vacation_day,
        worked_on_holiday_day=record.worked_on_holiday_day,
        worked_day=record.worked_day,
        used_vacation_day=record.used_vacation_day,
        used_sick_leave_day=record.used_sick_leave_day,
        used_medical_expense_baht=record.used_medical_expense_baht,
        version=record.version,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _to_decimal(value: object) -> Decimal:
    # SQLite hands SUM() back as float; go through str to keep the written digits.
    return value if isinstance(value, Decimal) else Decimal(str(value))


# ---------------------------------------------------------------------------
# Locking and recompute
# ---------------------------------------------------------------------------


async def find_annual_record(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    year: int,
    *,
    for_update: bool = False,
) -> AnnualRecord | None:
    query = select(AnnualRecord).where(
        col(AnnualRecord.company_id) == company_id,
        col(AnnualRecord.employee_id) == employee_id,
        col(AnnualRecord.year) == year,
    )
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_record_for_update(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    year: int,
) -> AnnualRecord:
    """Lock the (employee, year) record with SELECT ... FOR UPDATE.

    Raises RecordNotFoundError instead of creating anything: records only come
    from onboarding or the rollover scheduler.
    """
    record = await find_annual_record(session, company_id, employee_id, year, for_update=True)
    if record is None:
        raise RecordNotFoundError(employee_id, year)
    return record


async def compute_counters_from_ledger(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    year: int,
) -> dict[str, Decimal]:
    """Sum every ledger-derived counter for one (employee, year) in a single query."""
    amount = col(UsageLedgerEntry.amount)
    entry_type = col(UsageLedgerEntry.entry_type)
    columns = [
        func.coalesce(
            func.sum(case((entry_type.in_([t.value for t in sources]), amount), else_=0)),
            0,
        ).label(counter)
        for counter, sources in COUNTER_SOURCES.items()
    ]

    result = await session.execute(
        select(*columns).where(
            col(UsageLedgerEntry.company_id) == company_id,
            col(UsageLedgerEntry.employee_id) == employee_id,
            col(UsageLedgerEntry.entry_date) >= date(year, 1, 1),
            col(UsageLedgerEntry.entry_date) <= date(year, 12, 31),
        )
    )
    row = result.one()
    return {counter: _to_decimal(getattr(row, counter)) for counter in COUNTER_SOURCES}


async def recompute_counters(session: AsyncSession, record: AnnualRecord) -> AnnualRecord:
    """Replace the record's usage counters with fresh sums from the ledger.

    Caller must hold the row lock (``get_record_for_update``) and must have
    flushed its own ledger change so the sums include it.
    """
    counters = await compute_counters_from_ledger(session, record.company_id, record.employee_id, record.year)
    for counter, value in counters.items():
        setattr(record, counter, value)
    record.version += 1
    await session.flush()
    return record


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_annual_record(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    year: int,
) -> AnnualRecordResponse:
    record = await find_annual_record(session, company_id, employee_id, year)
    if record is None:
        raise RecordNotFoundError(employee_id, year)
    return build_annual_record_response(record)


async def list_annual_records(
    session: AsyncSession,
    company_id: uuid.UUID,
    *,
    employee_id: uuid.UUID | None = None,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AnnualRecordListResponse:
    """List records for one employee (newest year first) and/or one year."""
    base_filter = [col(AnnualRecord.company_id) == company_id]
    if employee_id is not None:
        base_filter.append(col(AnnualRecord.employee_id) == employee_id)
    if year is not None:
        base_filter.append(col(AnnualRecord.year) == year)

    count_result = await session.execute(select(func.count()).select_from(AnnualRecord).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AnnualRecord)
        .where(*base_filter)
        .order_by(col(AnnualRecord.year).desc(), col(AnnualRecord.employee_id))
        .offset(offset)
        .limit(limit)
    )
    records = list(result.scalars().all())

    return AnnualRecordListResponse(items=[build_annual_record_response(r) for r in records], total=total)


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def create_annual_record(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateAnnualRecordRequest,
) -> AnnualRecordResponse:
    """Onboard an employee for a year: no carry-over, counters from the ledger.

    Employees the directory knows must have started by the end of ``year``.
    Ids the directory has never seen are accepted, as the sweep accepts them.
    """
    employee = await get_employee_service().get_employee(auth.company_id, payload.employee_id)
    if employee is not None and not employee.is_employed_in(payload.year):
        raise AppError(f"Employee starts after {payload.year} and cannot be onboarded for it", status_code=422)

    if payload.quota_plan_id is not None:
        plan = await get_quota_plan(session, auth.company_id, payload.quota_plan_id)
    else:
        plan = await most_recent_applicable_plan(session, auth.company_id, payload.year)

    record = AnnualRecord(
        company_id=auth.company_id,
        employee_id=payload.employee_id,
        year=payload.year,
        quota_plan_id=plan.id if plan is not None else None,
        state=RecordState.BOOTSTRAPPED,
        rollover_vacation_day=Decimal(0),
    )
    session.add(record)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Annual record already exists for this employee and year", status_code=409) from None

    # Entries logged before onboarding still count.
    await recompute_counters(session, record)

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.ANNUAL_RECORD,
        entity_id=record.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(record),
    )

    await session.commit()
    await session.refresh(record)
    return build_annual_record_response(record)


async def update_annual_record(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    year: int,
    payload: UpdateAnnualRecordRequest,
) -> AnnualRecordResponse:
    """Reassign the plan or correct the opening carry-over of a record."""
    record = await get_record_for_update(session, auth.company_id, employee_id, year)
    before = model_to_audit_dict(record)

    if payload.quota_plan_id is not None:
        plan = await get_quota_plan(session, auth.company_id, payload.quota_plan_id)
        record.quota_plan_id = plan.id
    if payload.rollover_vacation_day is not None:
        record.rollover_vacation_day = payload.rollover_vacation_day
    record.version += 1
    await session.flush()

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.ANNUAL_RECORD,
        entity_id=record.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(record),
    )

    await session.commit()
    await session.refresh(record)
    return build_annual_record_response(record)


async def resync_annual_record(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    year: int,
) -> AnnualRecordResponse:
    """Recompute one record's counters from the ledger (full replace)."""
    record = await get_record_for_update(session, auth.company_id, employee_id, year)
    before = model_to_audit_dict(record)
    await recompute_counters(session, record)

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.ANNUAL_RECORD,
        entity_id=record.id,
        action=AuditAction.RESYNC,
        before_json=before,
        after_json=model_to_audit_dict(record),
    )

    await session.commit()
    await session.refresh(record)
    return build_annual_record_response(record)


async def resync_year(
    session: AsyncSession,
    auth: AuthContext,
    year: int,
) -> ResyncYearResponse:
    """Recompute every record of a year, locking each one in employee order."""
    result = await session.execute(
        select(AnnualRecord)
        .where(col(AnnualRecord.company_id) == auth.company_id, col(AnnualRecord.year) == year)
        .order_by(col(AnnualRecord.employee_id))
        .with_for_update()
    )
    records = list(result.scalars().all())

    for record in records:
        before = model_to_audit_dict(record)
        await recompute_counters(session, record)
        await write_audit_log(
            session,
            company_id=auth.company_id,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.ANNUAL_RECORD,
            entity_id=record.id,
            action=AuditAction.RESYNC,
            before_json=before,
            after_json=model_to_audit_dict(record),
        )

    await session.commit()
    return ResyncYearResponse(year=year, resynced=len(records))


async def assign_quota_plan_to_year(
    session: AsyncSession,
    auth: AuthContext,
    year: int,
    quota_plan_id: uuid.UUID,
) -> AssignQuotaPlanResponse:
    """Point every record of ``year`` at a plan and onboard employees without one."""
    plan = await get_quota_plan(session, auth.company_id, quota_plan_id)

    result = await session.execute(
        select(AnnualRecord)
        .where(col(AnnualRecord.company_id) == auth.company_id, col(AnnualRecord.year) == year)
        .order_by(col(AnnualRecord.employee_id))
        .with_for_update()
    )
    records = list(result.scalars().all())
    for record in records:
        record.quota_plan_id = plan.id
        record.version += 1

    have_record = {r.employee_id for r in records}
    employees = await get_employee_service().list_employees(auth.company_id)
    created = 0
    for employee in employees:
        if employee.id in have_record or not employee.is_employed_in(year):
            continue
        record = AnnualRecord(
            company_id=auth.company_id,
            employee_id=employee.id,
            year=year,
            quota_plan_id=plan.id,
            state=RecordState.BOOTSTRAPPED,
        )
        session.add(record)
        await session.flush()
        await recompute_counters(session, record)
        created += 1

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.QUOTA_PLAN,
        entity_id=plan.id,
        action=AuditAction.UPDATE,
        after_json={"assigned_year": year, "updated": len(records), "created": created},
    )

    await session.commit()
    return AssignQuotaPlanResponse(quota_plan_id=plan.id, year=year, updated=len(records), created=created)
