# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from annual_quota.exceptions import AppError
from annual_quota.models.annual_record import AnnualRecord
from annual_quota.models.enums import AuditAction, AuditEntityType
from annual_quota.models.quota_plan import QuotaPlan
from annual_quota.schemas.quota_plan import QuotaPlanListResponse, QuotaPlanResponse
from annual_quota.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from annual_quota.schemas.auth import AuthContext
    from annual_quota.schemas.quota_plan import CreateQuotaPlanRequest, UpdateQuotaPlanRequest


def build_quota_plan_response(plan: QuotaPlan) -> QuotaPlanResponse:
    return QuotaPlanResponse(
        id=plan.id,
        company_id=plan.company_id,
        plan_name=plan.plan_name,
        year=plan.year,
        quota_vacation_day=plan.quota_vacation_day,
        quota_medical_expense_baht=plan.quota_medical_expense_baht,
        created_by=plan.created_by,
        created_at=plan.created_at,
        updated_at=plan.updated_at,
    )


# ---------------------------------------------------------------------------
# Lookups used by the record lifecycle and the rollover scheduler
# ---------------------------------------------------------------------------


async def find_quota_plan(
    session: AsyncSession,
    company_id: uuid.UUID,
    plan_id: uuid.UUID,
) -> QuotaPlan | None:
    result = await session.execute(
        select(QuotaPlan).where(
            col(QuotaPlan.id) == plan_id,
            col(QuotaPlan.company_id) == company_id,
        )
    )
    return result.scalar_one_or_none()


async def get_quota_plan(
    session: AsyncSession,
    company_id: uuid.UUID,
    plan_id: uuid.UUID,
) -> QuotaPlan:
    """Get a single quota plan or raise 404."""
    plan = await find_quota_plan(session, company_id, plan_id)
    if plan is None:
        raise AppError("Quota plan not found", status_code=404)
    return plan


async def latest_plan_for_year(
    session: AsyncSession,
    company_id: uuid.UUID,
    year: int,
) -> QuotaPlan | None:
    """Most recently created plan configured for exactly ``year``."""
    result = await session.execute(
        select(QuotaPlan)
        .where(col(QuotaPlan.company_id) == company_id, col(QuotaPlan.year) == year)
        .order_by(col(QuotaPlan.created_at).desc(), col(QuotaPlan.id).desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def most_recent_applicable_plan(
    session: AsyncSession,
    company_id: uuid.UUID,
    year: int,
) -> QuotaPlan | None:
    """Newest plan for ``year`` or, failing that, for the closest earlier year."""
    result = await session.execute(
        select(QuotaPlan)
        .where(col(QuotaPlan.company_id) == company_id, col(QuotaPlan.year) <= year)
        .order_by(col(QuotaPlan.year).desc(), col(QuotaPlan.created_at).desc(), col(QuotaPlan.id).desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def is_plan_referenced(session: AsyncSession, plan_id: uuid.UUID) -> bool:
    result = await session.execute(
        select(func.count()).select_from(AnnualRecord).where(col(AnnualRecord.quota_plan_id) == plan_id)
    )
    return result.scalar_one() > 0


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def create_quota_plan(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateQuotaPlanRequest,
) -> QuotaPlanResponse:
    """Create a quota plan for a year."""
    plan = QuotaPlan(
        company_id=auth.company_id,
        plan_name=payload.plan_name,
        year=payload.year,
        quota_vacation_day=payload.quota_vacation_day,
        quota_medical_expense_baht=payload.quota_medical_expense_baht,
        created_by=auth.user_id,
    )
    session.add(plan)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Quota plan with this name already exists for this year", status_code=409) from None

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.QUOTA_PLAN,
        entity_id=plan.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(plan),
    )

    await session.commit()
    await session.refresh(plan)
    return build_quota_plan_response(plan)


async def list_quota_plans(
    session: AsyncSession,
    company_id: uuid.UUID,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> QuotaPlanListResponse:
    """List quota plans, newest year first, with an optional year filter."""
    base_filter = [col(QuotaPlan.company_id) == company_id]
    if year is not None:
        base_filter.append(col(QuotaPlan.year) == year)

    count_result = await session.execute(select(func.count()).select_from(QuotaPlan).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(QuotaPlan)
        .where(*base_filter)
        .order_by(col(QuotaPlan.year).desc(), col(QuotaPlan.plan_name))
        .offset(offset)
        .limit(limit)
    )
    plans = list(result.scalars().all())

    return QuotaPlanListResponse(items=[build_quota_plan_response(p) for p in plans], total=total)


async def update_quota_plan(
    session: AsyncSession,
    auth: AuthContext,
    plan_id: uuid.UUID,
    payload: UpdateQuotaPlanRequest,
) -> QuotaPlanResponse:
    """Edit a plan that no annual record has picked up yet."""
    plan = await get_quota_plan(session, auth.company_id, plan_id)
    if await is_plan_referenced(session, plan.id):
        raise AppError("Quota plan is referenced by annual records and cannot be changed", status_code=409)

    before = model_to_audit_dict(plan)
    for field_name, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(plan, field_name, value)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Quota plan with this name already exists for this year", status_code=409) from None

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.QUOTA_PLAN,
        entity_id=plan.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(plan),
    )

    await session.commit()
    await session.refresh(plan)
    return build_quota_plan_response(plan)


async def delete_quota_plan(
    session: AsyncSession,
    auth: AuthContext,
    plan_id: uuid.UUID,
) -> None:
    """Delete a plan that no annual record references."""
    plan = await get_quota_plan(session, auth.company_id, plan_id)
    if await is_plan_referenced(session, plan.id):
        raise AppError("Quota plan is referenced by annual records and cannot be deleted", status_code=409)

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.QUOTA_PLAN,
        entity_id=plan.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(plan),
    )

    await session.delete(plan)
    await session.commit()
