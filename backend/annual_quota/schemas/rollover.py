# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel

from annual_quota.models.enums import RolloverStatus


class RolloverOutcomeResponse(BaseModel):
    """What happened to one employee during a rollover sweep."""

    company_id: uuid.UUID
    employee_id: uuid.UUID
    status: RolloverStatus
    record_id: uuid.UUID | None = None
    quota_plan_id: uuid.UUID | None = None
    rollover_vacation_day: Decimal | None = None
    error: str | None = None


class RolloverRunResponse(BaseModel):
    """Response from the rollover trigger endpoint."""

    target_year: int
    rolled_over: int
    bootstrapped: int
    skipped: int
    failed: int
    outcomes: list[RolloverOutcomeResponse]
