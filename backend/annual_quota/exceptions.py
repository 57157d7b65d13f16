from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class RecordNotFoundError(AppError):
    """No annual record exists for the requested (employee, year)."""

    def __init__(self, employee_id: object, year: int) -> None:
        self.employee_id = employee_id
        self.year = year
        super().__init__(
            f"No annual record for employee {employee_id} in {year}",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class MissingQuotaPlanError(AppError):
    """Entitlement math was requested against a record with no resolvable quota plan.

    Kept distinct from a plan whose quotas are zero: callers must never read
    this condition as "no entitlement".
    """

    def __init__(self, record_id: object = None, quota_plan_id: object = None) -> None:
        self.record_id = record_id
        self.quota_plan_id = quota_plan_id
        if quota_plan_id is None:
            message = f"Annual record {record_id} has no quota plan assigned"
        else:
            message = f"Quota plan {quota_plan_id} referenced by annual record {record_id} does not exist"
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class DuplicateRolloverError(AppError):
    """A record for the rollover target (employee, year) already exists."""

    def __init__(self, employee_id: object, year: int) -> None:
        self.employee_id = employee_id
        self.year = year
        super().__init__(
            f"Annual record for employee {employee_id} in {year} already exists",
            status_code=status.HTTP_409_CONFLICT,
        )


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
