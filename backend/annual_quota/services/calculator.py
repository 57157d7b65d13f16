"""Quota calculator: pro-rating, remaining entitlement and the rollover formula.

Pure functions with no I/O. The reference date is always passed in so that
leap years and year boundaries can be exercised deterministically. All
arithmetic stays in ``Decimal`` at full context precision; rounding belongs
to whatever renders the numbers.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from annual_quota.exceptions import MissingQuotaPlanError

if TYPE_CHECKING:
    from datetime import date

    from annual_quota.models.annual_record import AnnualRecord
    from annual_quota.models.quota_plan import QuotaPlan


def is_leap_year(year: int) -> bool:
    """Gregorian rule: divisible by 4, except centuries not divisible by 400."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_elapsed(as_of: date) -> int:
    """Ordinal day of the year, 1-indexed and inclusive of ``as_of`` (Jan 1 = 1)."""
    return as_of.timetuple().tm_yday


def pro_rated(quota_total: Decimal, as_of: date) -> Decimal:
    """Share of an annual quota earned by the end of ``as_of``."""
    return Decimal(quota_total) * days_elapsed(as_of) / days_in_year(as_of.year)


def _require_plan(record: AnnualRecord, plan: QuotaPlan | None) -> QuotaPlan:
    if plan is None:
        raise MissingQuotaPlanError(record.id, record.quota_plan_id)
    return plan


def remaining_vacation(record: AnnualRecord, plan: QuotaPlan | None, as_of: date) -> Decimal:
    """Vacation days still available on ``as_of``.

    Not clamped: negative when over-used, above the annual quota when
    carry-over or holiday credit allows it.
    """
    plan = _require_plan(record, plan)
    return (
        Decimal(record.rollover_vacation_day)
        + Decimal(record.worked_on_holiday_day)
        + pro_rated(plan.quota_vacation_day, as_of)
        - Decimal(record.used_vacation_day)
    )


def remaining_medical(record: AnnualRecord, plan: QuotaPlan | None, as_of: date) -> Decimal:
    """Medical budget still available on ``as_of``; negative means over budget."""
    plan = _require_plan(record, plan)
    return pro_rated(plan.quota_medical_expense_baht, as_of) - Decimal(record.used_medical_expense_baht)


def rollover_vacation_day(record: AnnualRecord, plan: QuotaPlan | None) -> Decimal:
    """Carry-over into the following year, derived from a closed year.

    Uses the full annual quota (not pro-rated) and subtracts both vacation
    and sick leave. The result is not floored at zero.
    """
    plan = _require_plan(record, plan)
    return (
        Decimal(plan.quota_vacation_day)
        + Decimal(record.worked_on_holiday_day)
        - Decimal(record.used_vacation_day)
        - Decimal(record.used_sick_leave_day)
    )


def round_for_display(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up for presentation. Never feed the result back into a calculation."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
