"""Year-end rollover scheduler.

For every employee lacking a record for the target year Y:

- no record for Y-1: bootstrap Y with no carry-over (new hire)
- record for Y-1: carry over ``quota + holiday credit - vacation - sick`` of
  Y-1 into a new Y record
- record for Y already present: no-op, reported as SKIPPED

Each employee is handled in its own savepoint, so one failure never rolls
back or blocks the others. Running the sweep again for the same year is
always safe.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from annual_quota.exceptions import DuplicateRolloverError
from annual_quota.models.annual_record import AnnualRecord
from annual_quota.models.enums import AuditAction, AuditEntityType, RecordState, RolloverStatus
from annual_quota.schemas.rollover import RolloverOutcomeResponse, RolloverRunResponse
from annual_quota.services import calculator
from annual_quota.services.annual_record import find_annual_record, recompute_counters
from annual_quota.services.audit import SYSTEM_ACTOR, model_to_audit_dict, write_audit_log
from annual_quota.services.company import get_company_service
from annual_quota.services.employee import get_employee_service
from annual_quota.services.quota_plan import find_quota_plan, latest_plan_for_year, most_recent_applicable_plan

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@dataclass
class RolloverOutcome:
    """What happened to one employee."""

    company_id: uuid.UUID
    employee_id: uuid.UUID
    status: RolloverStatus
    record_id: uuid.UUID | None = None
    quota_plan_id: uuid.UUID | None = None
    rollover_vacation_day: Decimal | None = None
    error: str | None = None


@dataclass
class RolloverRunResult:
    """Summary of a rollover sweep."""

    target_year: int
    rolled_over: int = 0
    bootstrapped: int = 0
    skipped: int = 0
    failed: int = 0
    outcomes: list[RolloverOutcome] = field(default_factory=list)

    def add(self, outcome: RolloverOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.status == RolloverStatus.ROLLED_OVER:
            self.rolled_over += 1
        elif outcome.status == RolloverStatus.BOOTSTRAPPED:
            self.bootstrapped += 1
        elif outcome.status == RolloverStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1

    def to_response(self) -> RolloverRunResponse:
        return RolloverRunResponse(
            target_year=self.target_year,
            rolled_over=self.rolled_over,
            bootstrapped=self.bootstrapped,
            skipped=self.skipped,
            failed=self.failed,
            outcomes=[
                RolloverOutcomeResponse(
                    company_id=o.company_id,
                    employee_id=o.employee_id,
                    status=o.status,
                    record_id=o.record_id,
                    quota_plan_id=o.quota_plan_id,
                    rollover_vacation_day=o.rollover_vacation_day,
                    error=o.error,
                )
                for o in self.outcomes
            ],
        )


# ---------------------------------------------------------------------------
# Single-employee transition
# ---------------------------------------------------------------------------


async def roll_over_employee(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    target_year: int,
) -> RolloverOutcome:
    """Create the target-year record for one employee.

    Raises DuplicateRolloverError when the record already exists, including
    when a concurrent sweep inserts it first.
    """
    if await find_annual_record(session, company_id, employee_id, target_year) is not None:
        raise DuplicateRolloverError(employee_id, target_year)

    previous = await find_annual_record(session, company_id, employee_id, target_year - 1, for_update=True)

    if previous is None:
        plan = await most_recent_applicable_plan(session, company_id, target_year)
        if plan is None:
            logger.warning(
                "Bootstrapping employee=%s year=%d without a quota plan; entitlement queries will fail",
                employee_id,
                target_year,
            )
        record = AnnualRecord(
            company_id=company_id,
            employee_id=employee_id,
            year=target_year,
            quota_plan_id=plan.id if plan is not None else None,
            state=RecordState.BOOTSTRAPPED,
            rollover_vacation_day=Decimal(0),
        )
        status = RolloverStatus.BOOTSTRAPPED
    else:
        previous_plan = None
        if previous.quota_plan_id is not None:
            previous_plan = await find_quota_plan(session, company_id, previous.quota_plan_id)
        carry = calculator.rollover_vacation_day(previous, previous_plan)
        plan = await latest_plan_for_year(session, company_id, target_year) or previous_plan
        record = AnnualRecord(
            company_id=company_id,
            employee_id=employee_id,
            year=target_year,
            quota_plan_id=plan.id if plan is not None else None,
            state=RecordState.ROLLED_OVER,
            rollover_vacation_day=carry,
        )
        status = RolloverStatus.ROLLED_OVER

    session.add(record)
    try:
        await session.flush()
    except IntegrityError:
        raise DuplicateRolloverError(employee_id, target_year) from None

    await recompute_counters(session, record)

    await write_audit_log(
        session,
        company_id=company_id,
        actor_id=SYSTEM_ACTOR,
        entity_type=AuditEntityType.ANNUAL_RECORD,
        entity_id=record.id,
        action=AuditAction.ROLLOVER,
        before_json=model_to_audit_dict(previous) if previous is not None else None,
        after_json=model_to_audit_dict(record),
    )

    return RolloverOutcome(
        company_id=company_id,
        employee_id=employee_id,
        status=status,
        record_id=record.id,
        quota_plan_id=record.quota_plan_id,
        rollover_vacation_day=record.rollover_vacation_day,
    )


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


async def _previous_year_holders(
    session: AsyncSession,
    target_year: int,
    company_id: uuid.UUID | None,
) -> dict[uuid.UUID, list[uuid.UUID]]:
    """Employees with a ``target_year - 1`` record, grouped by company."""
    query = select(col(AnnualRecord.company_id), col(AnnualRecord.employee_id)).where(
        col(AnnualRecord.year) == target_year - 1
    )
    if company_id is not None:
        query = query.where(col(AnnualRecord.company_id) == company_id)
    rows = await session.execute(query.order_by(col(AnnualRecord.company_id), col(AnnualRecord.employee_id)))

    holders: dict[uuid.UUID, list[uuid.UUID]] = {}
    for cid, employee_id in rows.all():
        holders.setdefault(cid, []).append(employee_id)
    return holders


async def _sweep_candidates(
    session: AsyncSession,
    target_year: int,
    company_id: uuid.UUID | None,
) -> list[tuple[uuid.UUID, uuid.UUID]]:
    """(company, employee) pairs to visit: directory order first, then persisted-only employees."""
    holders = await _previous_year_holders(session, target_year, company_id)

    if company_id is not None:
        company_ids = [company_id]
    else:
        company_ids = [c.id for c in await get_company_service().list_companies()]
        company_ids += [cid for cid in holders if cid not in company_ids]

    employee_service = get_employee_service()
    candidates: list[tuple[uuid.UUID, uuid.UUID]] = []
    for cid in company_ids:
        listed: set[uuid.UUID] = set()
        for employee in await employee_service.list_employees(cid):
            listed.add(employee.id)
            if not employee.is_employed_in(target_year):
                logger.debug("Rollover: employee=%s starts after %d, not opening a record", employee.id, target_year)
                continue
            candidates.append((cid, employee.id))
        candidates.extend((cid, employee_id) for employee_id in holders.get(cid, []) if employee_id not in listed)
    return candidates


async def run_year_end_rollover(
    session: AsyncSession,
    target_year: int,
    *,
    company_id: uuid.UUID | None = None,
) -> RolloverRunResult:
    """Materialize ``target_year`` records for every employee that lacks one.

    Candidates are everyone holding a ``target_year - 1`` record plus whoever
    the Employee Service lists, so a worker with an empty directory still
    carries every persisted employee forward. With ``company_id`` unset every
    company seen in either source is swept.
    """
    result = RolloverRunResult(target_year=target_year)

    for cid, employee_id in await _sweep_candidates(session, target_year, company_id):
        try:
            async with session.begin_nested():
                outcome = await roll_over_employee(session, cid, employee_id, target_year)
        except DuplicateRolloverError:
            logger.info("Rollover no-op: employee=%s already has a %d record", employee_id, target_year)
            outcome = RolloverOutcome(company_id=cid, employee_id=employee_id, status=RolloverStatus.SKIPPED)
        except Exception as exc:
            logger.exception("Rollover failed for employee=%s year=%d", employee_id, target_year)
            outcome = RolloverOutcome(
                company_id=cid,
                employee_id=employee_id,
                status=RolloverStatus.FAILED,
                error=f"{type(exc).__name__}: {exc}",
            )
        result.add(outcome)

    await session.commit()
    logger.info(
        "Rollover to %d complete: rolled_over=%d bootstrapped=%d skipped=%d failed=%d",
        target_year,
        result.rolled_over,
        result.bootstrapped,
        result.skipped,
        result.failed,
    )
    return result
