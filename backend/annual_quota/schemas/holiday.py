# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field


class CreateHolidayRequest(BaseModel):
    date: date
    name: str = Field(min_length=1, max_length=255)


class HolidayResponse(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    date: date
    name: str


class HolidayListResponse(BaseModel):
    """Company holidays in date order."""

    items: list[HolidayResponse]
    total: int
