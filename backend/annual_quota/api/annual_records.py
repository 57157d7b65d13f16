# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from annual_quota.api.deps import AdminDep, AuthDep, validate_company_scope, validate_employee_scope
from annual_quota.db import SessionDep
from annual_quota.schemas.annual_record import (
    AnnualRecordListResponse,
    AnnualRecordResponse,
    CreateAnnualRecordRequest,
    ResyncYearResponse,
    UpdateAnnualRecordRequest,
)
from annual_quota.services import annual_record as annual_record_service

annual_records_router = APIRouter(
    prefix="/companies/{company_id}/annual-records",
    tags=["annual-records"],
    dependencies=[Depends(validate_company_scope)],
)

employee_annual_records_router = APIRouter(
    prefix="/companies/{company_id}/employees/{employee_id}/annual-records",
    tags=["annual-records"],
    dependencies=[Depends(validate_company_scope), Depends(validate_employee_scope)],
)


# ---------------------------------------------------------------------------
# Company-wide: /companies/{company_id}/annual-records
# ---------------------------------------------------------------------------


@annual_records_router.post("", response_model=AnnualRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_annual_record(
    payload: CreateAnnualRecordRequest,
    session: SessionDep,
    auth: AdminDep,
) -> AnnualRecordResponse:
    """Onboard an employee for a year (admin only)."""
    return await annual_record_service.create_annual_record(session, auth, payload)


@annual_records_router.get("", response_model=AnnualRecordListResponse)
async def list_annual_records_by_year(
    session: SessionDep,
    auth: AdminDep,
    year: int = Query(),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AnnualRecordListResponse:
    """List every employee's record for a year (admin only)."""
    return await annual_record_service.list_annual_records(
        session, auth.company_id, year=year, offset=offset, limit=limit
    )


@annual_records_router.post("/resync/{year}", response_model=ResyncYearResponse)
async def resync_year(
    year: int,
    session: SessionDep,
    auth: AdminDep,
) -> ResyncYearResponse:
    """Recompute every record of a year from the usage ledger (admin only)."""
    return await annual_record_service.resync_year(session, auth, year)


# ---------------------------------------------------------------------------
# Per employee: /companies/{company_id}/employees/{employee_id}/annual-records
# ---------------------------------------------------------------------------


@employee_annual_records_router.get("", response_model=AnnualRecordListResponse)
async def list_employee_annual_records(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AnnualRecordListResponse:
    """List an employee's records, newest year first."""
    return await annual_record_service.list_annual_records(
        session, auth.company_id, employee_id=employee_id, offset=offset, limit=limit
    )


@employee_annual_records_router.get("/{year}", response_model=AnnualRecordResponse)
async def get_annual_record(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    auth: AuthDep,
) -> AnnualRecordResponse:
    return await annual_record_service.get_annual_record(session, auth.company_id, employee_id, year)


@employee_annual_records_router.patch("/{year}", response_model=AnnualRecordResponse)
async def update_annual_record(
    employee_id: uuid.UUID,
    year: int,
    payload: UpdateAnnualRecordRequest,
    session: SessionDep,
    auth: AdminDep,
) -> AnnualRecordResponse:
    """Reassign the plan or correct the carry-over of a record (admin only)."""
    return await annual_record_service.update_annual_record(session, auth, employee_id, year, payload)


@employee_annual_records_router.post("/{year}/resync", response_model=AnnualRecordResponse)
async def resync_annual_record(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    auth: AdminDep,
) -> AnnualRecordResponse:
    """Recompute one record's counters from the usage ledger (admin only)."""
    return await annual_record_service.resync_annual_record(session, auth, employee_id, year)
