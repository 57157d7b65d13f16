# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from annual_quota.api.deps import AuthDep, validate_company_scope, validate_employee_scope
from annual_quota.db import SessionDep
from annual_quota.models.enums import LedgerEntryType
from annual_quota.schemas.ledger import (
    CreateLedgerEntryRequest,
    LedgerEntryResponse,
    LedgerListResponse,
    UpdateLedgerEntryRequest,
)
from annual_quota.services import ledger as ledger_service

ledger_router = APIRouter(
    prefix="/companies/{company_id}/ledger",
    tags=["ledger"],
    dependencies=[Depends(validate_company_scope)],
)

employee_ledger_router = APIRouter(
    prefix="/companies/{company_id}/employees/{employee_id}/ledger",
    tags=["ledger"],
    dependencies=[Depends(validate_company_scope), Depends(validate_employee_scope)],
)


@ledger_router.post("", response_model=LedgerEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_ledger_entry(
    payload: CreateLedgerEntryRequest,
    session: SessionDep,
    auth: AuthDep,
) -> LedgerEntryResponse:
    """Log leave, work or a medical expense; the owning annual record is resynced."""
    return await ledger_service.create_ledger_entry(session, auth, payload, payload.employee_id)


@ledger_router.get("/{entry_id}", response_model=LedgerEntryResponse)
async def get_ledger_entry(
    entry_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LedgerEntryResponse:
    return await ledger_service.get_ledger_entry(session, auth, entry_id)


@ledger_router.put("/{entry_id}", response_model=LedgerEntryResponse)
async def update_ledger_entry(
    entry_id: uuid.UUID,
    payload: UpdateLedgerEntryRequest,
    session: SessionDep,
    auth: AuthDep,
) -> LedgerEntryResponse:
    """Replace an entry; affected annual records are resynced."""
    return await ledger_service.update_ledger_entry(session, auth, entry_id, payload)


@ledger_router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ledger_entry(
    entry_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    """Delete an entry; the owning annual record is resynced."""
    await ledger_service.delete_ledger_entry(session, auth, entry_id)


@employee_ledger_router.get("", response_model=LedgerListResponse)
async def list_employee_ledger(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
    entry_type: LedgerEntryType | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LedgerListResponse:
    """List an employee's usage ledger, newest first."""
    return await ledger_service.list_ledger_entries(
        session, auth, employee_id, year=year, entry_type=entry_type, offset=offset, limit=limit
    )
