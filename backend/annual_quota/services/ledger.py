# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from annual_quota.exceptions import AppError
from annual_quota.models.enums import AuditAction, AuditEntityType, LedgerEntryType
from annual_quota.models.ledger import UsageLedgerEntry
from annual_quota.schemas.ledger import LedgerEntryResponse, LedgerListResponse
from annual_quota.services.annual_record import get_record_for_update, recompute_counters
from annual_quota.services.audit import model_to_audit_dict, write_audit_log
from annual_quota.services.holiday import is_company_holiday

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from annual_quota.models.annual_record import AnnualRecord
    from annual_quota.schemas.auth import AuthContext
    from annual_quota.schemas.ledger import LedgerEntryBody


def _build_ledger_entry_response(entry: UsageLedgerEntry) -> LedgerEntryResponse:
    return LedgerEntryResponse(
        id=entry.id,
        company_id=entry.company_id,
        employee_id=entry.employee_id,
        entry_type=LedgerEntryType(entry.entry_type),
        entry_date=entry.entry_date,
        amount=entry.amount,
        receipt_name=entry.receipt_name,
        note=entry.note,
        created_by=entry.created_by,
        created_at=entry.created_at,
    )


def _ensure_can_act_for(auth: AuthContext, employee_id: uuid.UUID) -> None:
    if not auth.can_act_for(employee_id):
        raise AppError("Not allowed to access another employee's ledger", status_code=403)


async def _lock_records(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    years: set[int],
) -> list[AnnualRecord]:
    """Lock every affected (employee, year) record, in ascending year order."""
    return [await get_record_for_update(session, company_id, employee_id, year) for year in sorted(years)]


async def _get_entry(
    session: AsyncSession,
    company_id: uuid.UUID,
    entry_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> UsageLedgerEntry:
    """Load an entry; with ``for_update`` the row is locked and re-read from the database.

    Writers derive the years to resync from the locked row, so a concurrent
    move to another year is never missed.
    """
    query = select(UsageLedgerEntry).where(
        col(UsageLedgerEntry.id) == entry_id,
        col(UsageLedgerEntry.company_id) == company_id,
    )
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    entry = result.scalar_one_or_none()
    if entry is None:
        raise AppError("Ledger entry not found", status_code=404)
    return entry


async def _resolve_entry_type(session: AsyncSession, company_id: uuid.UUID, payload: LedgerEntryBody) -> str:
    """Match work entries against the company holiday calendar.

    HOLIDAY_WORK off the calendar is rejected; WORK on a holiday is stored as
    HOLIDAY_WORK.
    """
    if payload.entry_type not in (LedgerEntryType.WORK, LedgerEntryType.HOLIDAY_WORK):
        return payload.entry_type
    on_holiday = await is_company_holiday(session, company_id, payload.entry_date)
    if payload.entry_type == LedgerEntryType.HOLIDAY_WORK and not on_holiday:
        raise AppError(f"{payload.entry_date.isoformat()} is not a company holiday", status_code=422)
    return LedgerEntryType.HOLIDAY_WORK.value if on_holiday else LedgerEntryType.WORK.value


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_ledger_entry(
    session: AsyncSession,
    auth: AuthContext,
    entry_id: uuid.UUID,
) -> LedgerEntryResponse:
    entry = await _get_entry(session, auth.company_id, entry_id)
    _ensure_can_act_for(auth, entry.employee_id)
    return _build_ledger_entry_response(entry)


async def list_ledger_entries(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    *,
    year: int | None = None,
    entry_type: LedgerEntryType | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LedgerListResponse:
    """List an employee's ledger entries, newest first."""
    _ensure_can_act_for(auth, employee_id)

    base_filter = [
        col(UsageLedgerEntry.company_id) == auth.company_id,
        col(UsageLedgerEntry.employee_id) == employee_id,
    ]
    if year is not None:
        base_filter.append(col(UsageLedgerEntry.entry_date) >= date(year, 1, 1))
        base_filter.append(col(UsageLedgerEntry.entry_date) <= date(year, 12, 31))
    if entry_type is not None:
        base_filter.append(col(UsageLedgerEntry.entry_type) == entry_type.value)

    count_result = await session.execute(select(func.count()).select_from(UsageLedgerEntry).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(UsageLedgerEntry)
        .where(*base_filter)
        .order_by(col(UsageLedgerEntry.entry_date).desc(), col(UsageLedgerEntry.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    entries = list(result.scalars().all())

    return LedgerListResponse(items=[_build_ledger_entry_response(e) for e in entries], total=total)


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def create_ledger_entry(
    session: AsyncSession,
    auth: AuthContext,
    payload: LedgerEntryBody,
    employee_id: uuid.UUID,
) -> LedgerEntryResponse:
    """Append a usage entry and resync the owning annual record.

    Flow:
    1. Lock the (employee, entry year) record; fail if it does not exist
    2. Insert the entry
    3. Recompute the record's counters from the ledger
    4. Audit, commit
    """
    _ensure_can_act_for(auth, employee_id)

    (record,) = await _lock_records(session, auth.company_id, employee_id, {payload.entry_date.year})
    entry_type = await _resolve_entry_type(session, auth.company_id, payload)

    entry = UsageLedgerEntry(
        company_id=auth.company_id,
        employee_id=employee_id,
        entry_type=entry_type,
        entry_date=payload.entry_date,
        amount=payload.amount,
        receipt_name=getattr(payload, "receipt_name", None),
        note=payload.note,
        created_by=auth.user_id,
    )
    session.add(entry)
    await session.flush()

    await recompute_counters(session, record)

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEDGER_ENTRY,
        entity_id=entry.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(entry),
    )

    await session.commit()
    await session.refresh(entry)
    return _build_ledger_entry_response(entry)


async def update_ledger_entry(
    session: AsyncSession,
    auth: AuthContext,
    entry_id: uuid.UUID,
    payload: LedgerEntryBody,
) -> LedgerEntryResponse:
    """Replace an entry; both the old and the new year are resynced when they differ."""
    entry = await _get_entry(session, auth.company_id, entry_id, for_update=True)
    _ensure_can_act_for(auth, entry.employee_id)

    records = await _lock_records(
        session,
        auth.company_id,
        entry.employee_id,
        {entry.entry_date.year, payload.entry_date.year},
    )

    entry_type = await _resolve_entry_type(session, auth.company_id, payload)

    before = model_to_audit_dict(entry)
    entry.entry_type = entry_type
    entry.entry_date = payload.entry_date
    entry.amount = payload.amount
    entry.receipt_name = getattr(payload, "receipt_name", None)
    entry.note = payload.note
    await session.flush()

    for record in records:
        await recompute_counters(session, record)

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEDGER_ENTRY,
        entity_id=entry.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(entry),
    )

    await session.commit()
    await session.refresh(entry)
    return _build_ledger_entry_response(entry)


async def delete_ledger_entry(
    session: AsyncSession,
    auth: AuthContext,
    entry_id: uuid.UUID,
) -> None:
    """Remove an entry and resync its year from what remains."""
    entry = await _get_entry(session, auth.company_id, entry_id, for_update=True)
    _ensure_can_act_for(auth, entry.employee_id)

    (record,) = await _lock_records(session, auth.company_id, entry.employee_id, {entry.entry_date.year})

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEDGER_ENTRY,
        entity_id=entry.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(entry),
    )

    await session.delete(entry)
    await session.flush()
    await recompute_counters(session, record)

    await session.commit()
