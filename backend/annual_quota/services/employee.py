# ruff: noqa: TC003
"""Employee directory collaborator.

The rollover sweep and plan assignment only need to enumerate a company's
staff and know when each person started; everything else about employees
lives in the upstream HR system.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class EmployeeInfo(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    hire_date: date | None = None

    def is_employed_in(self, year: int) -> bool:
        """True unless the employee starts after ``year`` ends."""
        return self.hire_date is None or self.hire_date.year <= year


@runtime_checkable
class EmployeeService(Protocol):
    async def get_employee(self, company_id: uuid.UUID, employee_id: uuid.UUID) -> EmployeeInfo | None: ...

    async def list_employees(self, company_id: uuid.UUID) -> list[EmployeeInfo]:
        """Every employee of the company, in a stable order."""
        ...


class InMemoryEmployeeService:
    """Dict-backed directory for development and tests."""

    def __init__(self) -> None:
        self._by_key: dict[tuple[uuid.UUID, uuid.UUID], EmployeeInfo] = {}

    def seed(self, employee: EmployeeInfo) -> None:
        """Insert or replace an employee."""
        self._by_key[(employee.company_id, employee.id)] = employee

    async def get_employee(self, company_id: uuid.UUID, employee_id: uuid.UUID) -> EmployeeInfo | None:
        return self._by_key.get((company_id, employee_id))

    async def list_employees(self, company_id: uuid.UUID) -> list[EmployeeInfo]:
        staff = [e for (cid, _), e in self._by_key.items() if cid == company_id]
        return sorted(staff, key=lambda e: (e.last_name, e.first_name, str(e.id)))


_employee_service: EmployeeService = InMemoryEmployeeService()


def get_employee_service() -> EmployeeService:
    return _employee_service


def set_employee_service(service: EmployeeService) -> None:
    """Swap the active directory (production wiring or tests)."""
    global _employee_service
    _employee_service = service
