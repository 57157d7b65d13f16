"""Tests for the pure quota calculator: leap years, pro-rating, remaining and rollover."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import pytest

from annual_quota.exceptions import MissingQuotaPlanError
from annual_quota.models.annual_record import AnnualRecord
from annual_quota.models.quota_plan import QuotaPlan
from annual_quota.services import calculator

COMPANY_ID = uuid.uuid4()
EMPLOYEE_ID = uuid.uuid4()


def _plan(vacation: str = "18", medical: str = "12000") -> QuotaPlan:
    return QuotaPlan(
        company_id=COMPANY_ID,
        plan_name="Standard",
        year=2024,
        quota_vacation_day=Decimal(vacation),
        quota_medical_expense_baht=Decimal(medical),
        created_by=uuid.uuid4(),
    )


def _record(**counters: str) -> AnnualRecord:
    values = {k: Decimal(v) for k, v in counters.items()}
    return AnnualRecord(company_id=COMPANY_ID, employee_id=EMPLOYEE_ID, year=2024, **values)


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("year", "expected"),
    [(2024, True), (2023, False), (1900, False), (2000, True), (2100, False)],
)
def test_is_leap_year(year: int, expected: bool) -> None:
    assert calculator.is_leap_year(year) is expected


def test_days_in_year() -> None:
    assert calculator.days_in_year(2024) == 366
    assert calculator.days_in_year(2023) == 365


def test_days_elapsed_is_one_indexed_and_inclusive() -> None:
    assert calculator.days_elapsed(date(2023, 1, 1)) == 1
    assert calculator.days_elapsed(date(2023, 12, 31)) == 365
    assert calculator.days_elapsed(date(2024, 12, 31)) == 366
    assert calculator.days_elapsed(date(2024, 3, 1)) == 61


# ---------------------------------------------------------------------------
# Pro-rating
# ---------------------------------------------------------------------------


def test_pro_rated_on_jan_first_is_one_day_share() -> None:
    assert calculator.pro_rated(Decimal(18), date(2023, 1, 1)) == Decimal(18) / 365
    assert calculator.pro_rated(Decimal(18), date(2024, 1, 1)) == Decimal(18) / 366


def test_pro_rated_on_dec_31_is_full_quota() -> None:
    assert calculator.pro_rated(Decimal(18), date(2023, 12, 31)) == Decimal(18)
    assert calculator.pro_rated(Decimal(18), date(2024, 12, 31)) == Decimal(18)


def test_pro_rated_mid_year_no_intermediate_rounding() -> None:
    # 2023-07-02 is day 183 of 365.
    result = calculator.pro_rated(Decimal(10), date(2023, 7, 2))
    assert result == Decimal(10) * 183 / 365
    assert result != calculator.round_for_display(result)


def test_pro_rated_zero_quota() -> None:
    assert calculator.pro_rated(Decimal(0), date(2024, 6, 1)) == 0


# ---------------------------------------------------------------------------
# Remaining entitlement
# ---------------------------------------------------------------------------


def test_remaining_vacation_full_year() -> None:
    record = _record(rollover_vacation_day="3", worked_on_holiday_day="2", used_vacation_day="5")
    remaining = calculator.remaining_vacation(record, _plan(), date(2024, 12, 31))
    assert remaining == Decimal(18)


def test_remaining_vacation_can_go_negative() -> None:
    record = _record(used_vacation_day="10")
    remaining = calculator.remaining_vacation(record, _plan(vacation="1"), date(2024, 12, 31))
    assert remaining == Decimal(-9)


def test_remaining_vacation_can_exceed_annual_quota() -> None:
    record = _record(rollover_vacation_day="6", worked_on_holiday_day="4")
    remaining = calculator.remaining_vacation(record, _plan(), date(2024, 12, 31))
    assert remaining == Decimal(28)


def test_remaining_vacation_ignores_sick_leave() -> None:
    record = _record(used_sick_leave_day="7")
    assert calculator.remaining_vacation(record, _plan(), date(2024, 12, 31)) == Decimal(18)


def test_remaining_medical() -> None:
    record = _record(used_medical_expense_baht="1500.50")
    remaining = calculator.remaining_medical(record, _plan(), date(2024, 12, 31))
    assert remaining == Decimal("10499.50")


def test_remaining_medical_over_budget() -> None:
    record = _record(used_medical_expense_baht="5000")
    remaining = calculator.remaining_medical(record, _plan(medical="1000"), date(2024, 12, 31))
    assert remaining == Decimal(-4000)


# ---------------------------------------------------------------------------
# Rollover formula
# ---------------------------------------------------------------------------


def test_rollover_formula() -> None:
    record = _record(worked_on_holiday_day="2", used_vacation_day="10", used_sick_leave_day="3")
    assert calculator.rollover_vacation_day(record, _plan()) == Decimal(7)


def test_rollover_uses_full_quota_not_pro_rated() -> None:
    record = _record()
    assert calculator.rollover_vacation_day(record, _plan(vacation="12.5")) == Decimal("12.5")


def test_rollover_is_not_clamped() -> None:
    record = _record(used_vacation_day="15", used_sick_leave_day="10")
    assert calculator.rollover_vacation_day(record, _plan()) == Decimal(-7)


def test_rollover_ignores_previous_carry_over() -> None:
    record = _record(rollover_vacation_day="30")
    assert calculator.rollover_vacation_day(record, _plan()) == Decimal(18)


# ---------------------------------------------------------------------------
# Missing plan versus zero plan
# ---------------------------------------------------------------------------


def test_missing_plan_raises() -> None:
    record = _record()
    with pytest.raises(MissingQuotaPlanError):
        calculator.remaining_vacation(record, None, date(2024, 6, 1))
    with pytest.raises(MissingQuotaPlanError):
        calculator.remaining_medical(record, None, date(2024, 6, 1))
    with pytest.raises(MissingQuotaPlanError):
        calculator.rollover_vacation_day(record, None)


def test_zero_plan_is_not_missing() -> None:
    record = _record()
    plan = _plan(vacation="0", medical="0")
    assert calculator.remaining_vacation(record, plan, date(2024, 6, 1)) == 0
    assert calculator.remaining_medical(record, plan, date(2024, 6, 1)) == 0


def test_missing_plan_message_distinguishes_unassigned_from_dangling() -> None:
    unassigned = MissingQuotaPlanError(record_id="r1")
    dangling = MissingQuotaPlanError(record_id="r1", quota_plan_id="p1")
    assert "no quota plan assigned" in unassigned.message
    assert "does not exist" in dangling.message
    assert unassigned.status_code == dangling.status_code == 409


# ---------------------------------------------------------------------------
# Display rounding
# ---------------------------------------------------------------------------


def test_round_for_display_half_up() -> None:
    assert calculator.round_for_display(Decimal("2.345")) == Decimal("2.35")
    assert calculator.round_for_display(Decimal("2.344")) == Decimal("2.34")
    assert calculator.round_for_display(Decimal("-2.345")) == Decimal("-2.35")
    assert calculator.round_for_display(Decimal("7.5"), places=0) == Decimal(8)
