# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from annual_quota.api.deps import AdminDep, AuthDep, validate_company_scope
from annual_quota.exceptions import AppError
from annual_quota.schemas.employee import EmployeeListResponse, EmployeeResponse, UpsertEmployeeRequest
from annual_quota.services.employee import EmployeeInfo, get_employee_service

employees_router = APIRouter(
    prefix="/companies/{company_id}/employees",
    tags=["employees"],
    dependencies=[Depends(validate_company_scope)],
)


def _to_response(employee: EmployeeInfo) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        company_id=employee.company_id,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email,
        hire_date=employee.hire_date,
    )


@employees_router.put("/{employee_id}", response_model=EmployeeResponse)
async def upsert_employee(
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
    auth: AdminDep,
) -> EmployeeResponse:
    """Create or update an employee in the stub directory (admin only)."""
    employee = EmployeeInfo(
        id=employee_id,
        company_id=company_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        hire_date=payload.hire_date,
    )
    get_employee_service().seed(employee)  # ty: ignore[unresolved-attribute]
    return _to_response(employee)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    auth: AuthDep,
) -> EmployeeResponse:
    employee = await get_employee_service().get_employee(company_id, employee_id)
    if employee is None:
        raise AppError("Employee not found", status_code=404)
    return _to_response(employee)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(
    company_id: uuid.UUID,
    auth: AuthDep,
) -> EmployeeListResponse:
    items = [_to_response(e) for e in await get_employee_service().list_employees(company_id)]
    return EmployeeListResponse(items=items, total=len(items))
