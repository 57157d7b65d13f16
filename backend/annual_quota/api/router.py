from fastapi import APIRouter

from annual_quota.api.annual_records import annual_records_router, employee_annual_records_router
from annual_quota.api.employees import employees_router
from annual_quota.api.holidays import holidays_router
from annual_quota.api.ledger import employee_ledger_router, ledger_router
from annual_quota.api.quota_plans import quota_plans_router
from annual_quota.api.quotas import quota_router
from annual_quota.api.rollover import rollover_router

api_router = APIRouter()
api_router.include_router(quota_plans_router)
api_router.include_router(annual_records_router)
api_router.include_router(employee_annual_records_router)
api_router.include_router(ledger_router)
api_router.include_router(employee_ledger_router)
api_router.include_router(quota_router)
api_router.include_router(rollover_router)
api_router.include_router(employees_router)
api_router.include_router(holidays_router)
