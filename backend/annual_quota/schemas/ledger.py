# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Discriminator, Field

from annual_quota.models.enums import LedgerEntryType

# ---------------------------------------------------------------------------
# Entry bodies (discriminated on entry_type)
# ---------------------------------------------------------------------------


class LeaveEntryPayload(BaseModel):
    """A single day (or half day) of leave."""

    entry_type: Literal["VACATION", "SICK", "PERSONAL", "OTHER"]
    entry_date: date
    amount: Decimal = Field(default=Decimal(1), gt=0, le=1, max_digits=3, decimal_places=2)
    note: str | None = Field(default=None, max_length=1000)


class WorkEntryPayload(BaseModel):
    """Days worked on a date; HOLIDAY_WORK also earns vacation credit."""

    entry_type: Literal["WORK", "HOLIDAY_WORK"]
    entry_date: date
    amount: Decimal = Field(default=Decimal(1), gt=0, le=1, max_digits=3, decimal_places=2)
    note: str | None = Field(default=None, max_length=1000)


class MedicalExpensePayload(BaseModel):
    """A medical receipt in baht."""

    entry_type: Literal["MEDICAL_EXPENSE"]
    entry_date: date
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    receipt_name: str | None = Field(default=None, max_length=255)
    note: str | None = Field(default=None, max_length=1000)


class CreateLeaveEntryRequest(LeaveEntryPayload):
    employee_id: uuid.UUID


class CreateWorkEntryRequest(WorkEntryPayload):
    employee_id: uuid.UUID


class CreateMedicalExpenseRequest(MedicalExpensePayload):
    employee_id: uuid.UUID


LedgerEntryBody = LeaveEntryPayload | WorkEntryPayload | MedicalExpensePayload

CreateLedgerEntryRequest = Annotated[
    CreateLeaveEntryRequest | CreateWorkEntryRequest | CreateMedicalExpenseRequest,
    Discriminator("entry_type"),
]

# Updates replace the whole entry; the owning employee cannot change.
UpdateLedgerEntryRequest = Annotated[
    LeaveEntryPayload | WorkEntryPayload | MedicalExpensePayload,
    Discriminator("entry_type"),
]

# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class LedgerEntryResponse(BaseModel):
    """A single usage ledger entry."""

    id: uuid.UUID
    company_id: uuid.UUID
    employee_id: uuid.UUID
    entry_type: LedgerEntryType
    entry_date: date
    amount: Decimal
    receipt_name: str | None
    note: str | None
    created_by: uuid.UUID
    created_at: datetime


class LedgerListResponse(BaseModel):
    """Paginated ledger entries."""

    items: list[LedgerEntryResponse]
    total: int
