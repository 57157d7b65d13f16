# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from annual_quota.api.deps import AdminDep, AuthDep, validate_company_scope
from annual_quota.db import SessionDep
from annual_quota.schemas.quota_plan import (
    AssignQuotaPlanRequest,
    AssignQuotaPlanResponse,
    CreateQuotaPlanRequest,
    QuotaPlanListResponse,
    QuotaPlanResponse,
    UpdateQuotaPlanRequest,
)
from annual_quota.services import annual_record as annual_record_service
from annual_quota.services import quota_plan as quota_plan_service

quota_plans_router = APIRouter(
    prefix="/companies/{company_id}/quota-plans",
    tags=["quota-plans"],
    dependencies=[Depends(validate_company_scope)],
)


@quota_plans_router.post("", response_model=QuotaPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_quota_plan(
    payload: CreateQuotaPlanRequest,
    session: SessionDep,
    auth: AdminDep,
) -> QuotaPlanResponse:
    """Create a quota plan (admin only)."""
    return await quota_plan_service.create_quota_plan(session, auth, payload)


@quota_plans_router.get("", response_model=QuotaPlanListResponse)
async def list_quota_plans(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> QuotaPlanListResponse:
    """List quota plans with an optional year filter."""
    return await quota_plan_service.list_quota_plans(session, auth.company_id, year, offset, limit)


@quota_plans_router.get("/{plan_id}", response_model=QuotaPlanResponse)
async def get_quota_plan(
    plan_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> QuotaPlanResponse:
    plan = await quota_plan_service.get_quota_plan(session, auth.company_id, plan_id)
    return quota_plan_service.build_quota_plan_response(plan)


@quota_plans_router.patch("/{plan_id}", response_model=QuotaPlanResponse)
async def update_quota_plan(
    plan_id: uuid.UUID,
    payload: UpdateQuotaPlanRequest,
    session: SessionDep,
    auth: AdminDep,
) -> QuotaPlanResponse:
    """Edit a plan that no annual record references yet (admin only)."""
    return await quota_plan_service.update_quota_plan(session, auth, plan_id, payload)


@quota_plans_router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quota_plan(
    plan_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete an unreferenced plan (admin only)."""
    await quota_plan_service.delete_quota_plan(session, auth, plan_id)


@quota_plans_router.post("/assign/{year}", response_model=AssignQuotaPlanResponse)
async def assign_quota_plan(
    year: int,
    payload: AssignQuotaPlanRequest,
    session: SessionDep,
    auth: AdminDep,
) -> AssignQuotaPlanResponse:
    """Assign a plan to every employee's record for a year (admin only)."""
    return await annual_record_service.assign_quota_plan_to_year(session, auth, year, payload.quota_plan_id)
