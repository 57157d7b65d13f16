# ruff: noqa: B008, TC001, TC003
"""Admin trigger for the year-end rollover sweep."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from annual_quota.api.deps import AdminDep, validate_company_scope
from annual_quota.db import SessionDep
from annual_quota.schemas.rollover import RolloverRunResponse
from annual_quota.services.rollover import run_year_end_rollover

rollover_router = APIRouter(
    prefix="/companies/{company_id}/rollover",
    tags=["rollover"],
    dependencies=[Depends(validate_company_scope)],
)


@rollover_router.post("", response_model=RolloverRunResponse)
async def trigger_rollover(
    session: SessionDep,
    auth: AdminDep,
    target_year: int | None = Query(default=None, ge=1900, le=9999),
) -> RolloverRunResponse:
    """Create missing target-year records for the company's employees (admin only).

    Safe to repeat: employees who already have a record are reported as SKIPPED.
    Defaults to the current year, which makes this the reconciliation sweep.
    """
    result = await run_year_end_rollover(
        session,
        target_year if target_year is not None else date.today().year,
        company_id=auth.company_id,
    )
    return result.to_response()
