"""Company holiday calendar.

HOLIDAY_WORK ledger entries are only accepted on a date listed here, and a
holiday that such entries already point at cannot be removed.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from annual_quota.exceptions import AppError
from annual_quota.models.enums import AuditAction, AuditEntityType, LedgerEntryType
from annual_quota.models.holiday import CompanyHoliday
from annual_quota.models.ledger import UsageLedgerEntry
from annual_quota.schemas.holiday import HolidayListResponse, HolidayResponse
from annual_quota.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from annual_quota.schemas.auth import AuthContext
    from annual_quota.schemas.holiday import CreateHolidayRequest


def _build_holiday_response(holiday: CompanyHoliday) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        company_id=holiday.company_id,
        date=holiday.date,
        name=holiday.name,
    )


async def is_company_holiday(session: AsyncSession, company_id: uuid.UUID, day: date) -> bool:
    result = await session.execute(
        select(func.count())
        .select_from(CompanyHoliday)
        .where(col(CompanyHoliday.company_id) == company_id, col(CompanyHoliday.date) == day)
    )
    return result.scalar_one() > 0


async def create_holiday(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    holiday = CompanyHoliday(company_id=auth.company_id, date=payload.date, name=payload.name)
    session.add(holiday)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Holiday already exists for this date", status_code=409) from None

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(holiday),
    )

    await session.commit()
    await session.refresh(holiday)
    return _build_holiday_response(holiday)


async def list_holidays(
    session: AsyncSession,
    company_id: uuid.UUID,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> HolidayListResponse:
    """List company holidays in date order, optionally for one year."""
    base_filter = [col(CompanyHoliday.company_id) == company_id]
    if year is not None:
        base_filter.append(col(CompanyHoliday.date) >= date(year, 1, 1))
        base_filter.append(col(CompanyHoliday.date) <= date(year, 12, 31))

    count_result = await session.execute(select(func.count()).select_from(CompanyHoliday).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(CompanyHoliday).where(*base_filter).order_by(col(CompanyHoliday.date)).offset(offset).limit(limit)
    )
    holidays = list(result.scalars().all())

    return HolidayListResponse(items=[_build_holiday_response(h) for h in holidays], total=total)


async def delete_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
) -> None:
    """Delete a holiday nobody has logged holiday work against."""
    result = await session.execute(
        select(CompanyHoliday).where(
            col(CompanyHoliday.id) == holiday_id,
            col(CompanyHoliday.company_id) == auth.company_id,
        )
    )
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise AppError("Holiday not found", status_code=404)

    in_use = await session.execute(
        select(func.count())
        .select_from(UsageLedgerEntry)
        .where(
            col(UsageLedgerEntry.company_id) == auth.company_id,
            col(UsageLedgerEntry.entry_type) == LedgerEntryType.HOLIDAY_WORK.value,
            col(UsageLedgerEntry.entry_date) == holiday.date,
        )
    )
    if in_use.scalar_one() > 0:
        raise AppError("Holiday work has been logged on this date; the holiday cannot be deleted", status_code=409)

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(holiday),
    )

    await session.delete(holiday)
    await session.commit()
