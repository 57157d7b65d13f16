# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CreateQuotaPlanRequest(BaseModel):
    """Request body for creating a quota plan."""

    plan_name: str = Field(min_length=1, max_length=255)
    year: int = Field(ge=1900, le=9999)
    quota_vacation_day: Decimal = Field(ge=0, max_digits=6, decimal_places=2)
    quota_medical_expense_baht: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class UpdateQuotaPlanRequest(BaseModel):
    """Partial update of a quota plan that no annual record references yet."""

    plan_name: str | None = Field(default=None, min_length=1, max_length=255)
    year: int | None = Field(default=None, ge=1900, le=9999)
    quota_vacation_day: Decimal | None = Field(default=None, ge=0, max_digits=6, decimal_places=2)
    quota_medical_expense_baht: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class AssignQuotaPlanRequest(BaseModel):
    """Point every record of a year at a plan, bootstrapping missing records."""

    quota_plan_id: uuid.UUID


class QuotaPlanResponse(BaseModel):
    """Response schema for a quota plan."""

    id: uuid.UUID
    company_id: uuid.UUID
    plan_name: str
    year: int
    quota_vacation_day: Decimal
    quota_medical_expense_baht: Decimal
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime


class QuotaPlanListResponse(BaseModel):
    """Paginated list of quota plans."""

    items: list[QuotaPlanResponse]
    total: int


class AssignQuotaPlanResponse(BaseModel):
    """Result of assigning a plan to a whole year."""

    quota_plan_id: uuid.UUID
    year: int
    updated: int
    created: int
