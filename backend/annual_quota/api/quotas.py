# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query

from annual_quota.api.deps import AuthDep, validate_company_scope, validate_employee_scope
from annual_quota.db import SessionDep
from annual_quota.schemas.quota import (
    QuotaSnapshotResponse,
    RemainingMedicalResponse,
    RemainingVacationResponse,
)
from annual_quota.services import quota as quota_service

quota_router = APIRouter(
    prefix="/companies/{company_id}/employees/{employee_id}/quota",
    tags=["quota"],
    dependencies=[Depends(validate_company_scope), Depends(validate_employee_scope)],
)


@quota_router.get("", response_model=QuotaSnapshotResponse)
async def get_quota_snapshot(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    as_of: date | None = Query(default=None),
) -> QuotaSnapshotResponse:
    """Pro-rated and remaining entitlement on ``as_of`` (default: today)."""
    return await quota_service.get_quota_snapshot(session, auth.company_id, employee_id, as_of or date.today())


@quota_router.get("/vacation", response_model=RemainingVacationResponse)
async def get_remaining_vacation(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    as_of: date | None = Query(default=None),
) -> RemainingVacationResponse:
    return await quota_service.get_remaining_vacation(session, auth.company_id, employee_id, as_of or date.today())


@quota_router.get("/medical", response_model=RemainingMedicalResponse)
async def get_remaining_medical(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    as_of: date | None = Query(default=None),
) -> RemainingMedicalResponse:
    return await quota_service.get_remaining_medical(session, auth.company_id, employee_id, as_of or date.today())
