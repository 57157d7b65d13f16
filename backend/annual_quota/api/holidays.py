# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from annual_quota.api.deps import AdminDep, AuthDep, validate_company_scope
from annual_quota.db import SessionDep
from annual_quota.schemas.holiday import CreateHolidayRequest, HolidayListResponse, HolidayResponse
from annual_quota.services import holiday as holiday_service

holidays_router = APIRouter(
    prefix="/companies/{company_id}/holidays",
    tags=["holidays"],
    dependencies=[Depends(validate_company_scope)],
)


@holidays_router.post("", response_model=HolidayResponse, status_code=status.HTTP_201_CREATED)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Add a date to the company holiday calendar (admin only)."""
    return await holiday_service.create_holiday(session, auth, payload)


@holidays_router.get("", response_model=HolidayListResponse)
async def list_holidays(
    company_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> HolidayListResponse:
    return await holiday_service.list_holidays(session, company_id, year, offset, limit)


@holidays_router.delete("/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Remove a holiday (admin only); refused while holiday work is logged on it."""
    await holiday_service.delete_holiday(session, auth, holiday_id)
