"""Tests for the usage ledger and the counter sync it drives.

Covers counter derivation per entry type, no drift after deletion, moving an
entry across a year boundary, the holiday calendar check, the no-auto-create
rule and ownership checks.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import update
from sqlmodel import col

from annual_quota.models.ledger import UsageLedgerEntry
from annual_quota.services.annual_record import get_record_for_update, recompute_counters

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

COMPANY_ID = uuid.uuid4()
ADMIN_ID = uuid.uuid4()
EMPLOYEE_ID = uuid.uuid4()
OTHER_EMPLOYEE_ID = uuid.uuid4()

AUTH_HEADERS = {
    "X-Company-Id": str(COMPANY_ID),
    "X-User-Id": str(ADMIN_ID),
    "X-Role": "admin",
}
EMPLOYEE_HEADERS = {
    "X-Company-Id": str(COMPANY_ID),
    "X-User-Id": str(EMPLOYEE_ID),
    "X-Role": "employee",
}

RECORDS_URL = f"/companies/{COMPANY_ID}/annual-records"
LEDGER_URL = f"/companies/{COMPANY_ID}/ledger"
EMPLOYEE_LEDGER_URL = f"/companies/{COMPANY_ID}/employees/{EMPLOYEE_ID}/ledger"
EMPLOYEE_RECORDS_URL = f"/companies/{COMPANY_ID}/employees/{EMPLOYEE_ID}/annual-records"
HOLIDAYS_URL = f"/companies/{COMPANY_ID}/holidays"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _onboard(client: AsyncClient, year: int = 2024, employee_id: uuid.UUID = EMPLOYEE_ID) -> None:
    resp = await client.post(
        RECORDS_URL,
        json={"employee_id": str(employee_id), "year": year},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 201, resp.text


async def _log(
    client: AsyncClient,
    entry_type: str,
    entry_date: date,
    amount: str | None = None,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> Any:
    body: dict[str, Any] = {
        "employee_id": str(EMPLOYEE_ID),
        "entry_type": entry_type,
        "entry_date": entry_date.isoformat(),
        **extra,
    }
    if amount is not None:
        body["amount"] = amount
    return await client.post(LEDGER_URL, json=body, headers=headers or EMPLOYEE_HEADERS)


async def _holiday(client: AsyncClient, day: date, name: str = "Songkran") -> None:
    resp = await client.post(HOLIDAYS_URL, json={"date": day.isoformat(), "name": name}, headers=AUTH_HEADERS)
    assert resp.status_code == 201, resp.text


async def _record(client: AsyncClient, year: int = 2024) -> dict[str, Any]:
    resp = await client.get(f"{EMPLOYEE_RECORDS_URL}/{year}", headers=AUTH_HEADERS)
    assert resp.status_code == 200, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Counter derivation
# ---------------------------------------------------------------------------


async def test_each_entry_type_feeds_its_counter(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    await _holiday(async_client, date(2024, 4, 13))

    assert (await _log(async_client, "VACATION", date(2024, 2, 1))).status_code == 201
    assert (await _log(async_client, "VACATION", date(2024, 2, 2), amount="0.5")).status_code == 201
    assert (await _log(async_client, "SICK", date(2024, 2, 5))).status_code == 201
    assert (await _log(async_client, "HOLIDAY_WORK", date(2024, 4, 13))).status_code == 201
    assert (await _log(async_client, "WORK", date(2024, 4, 15))).status_code == 201
    assert (await _log(async_client, "PERSONAL", date(2024, 4, 16))).status_code == 201
    resp = await _log(async_client, "MEDICAL_EXPENSE", date(2024, 5, 1), amount="1500.50", receipt_name="clinic.pdf")
    assert resp.status_code == 201
    assert resp.json()["receipt_name"] == "clinic.pdf"

    record = await _record(async_client)
    assert Decimal(record["used_vacation_day"]) == Decimal("1.5")
    assert Decimal(record["used_sick_leave_day"]) == Decimal(1)
    assert Decimal(record["worked_on_holiday_day"]) == Decimal(1)
    assert Decimal(record["worked_day"]) == Decimal(2)
    assert Decimal(record["used_medical_expense_baht"]) == Decimal("1500.50")


async def test_leave_amount_defaults_to_one_day(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "VACATION", date(2024, 6, 3))
    assert Decimal(resp.json()["amount"]) == Decimal(1)


async def test_leave_amount_over_one_day_rejected(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "VACATION", date(2024, 6, 3), amount="2")
    assert resp.status_code == 422


async def test_medical_expense_requires_amount(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "MEDICAL_EXPENSE", date(2024, 6, 3))
    assert resp.status_code == 422


async def test_unknown_entry_type_rejected(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "BEREAVEMENT", date(2024, 6, 3))
    assert resp.status_code == 422


async def test_each_write_bumps_version(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    before = (await _record(async_client))["version"]
    await _log(async_client, "VACATION", date(2024, 6, 3))
    assert (await _record(async_client))["version"] == before + 1


# ---------------------------------------------------------------------------
# No drift
# ---------------------------------------------------------------------------


async def test_no_drift_after_delete(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    ids = []
    for day in (1, 2, 3):
        resp = await _log(async_client, "VACATION", date(2024, 7, day))
        ids.append(resp.json()["id"])

    resp = await async_client.delete(f"{LEDGER_URL}/{ids[1]}", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 204

    record = await _record(async_client)
    assert Decimal(record["used_vacation_day"]) == Decimal(2)

    listing = await async_client.get(EMPLOYEE_LEDGER_URL, headers=EMPLOYEE_HEADERS)
    assert listing.json()["total"] == 2


async def test_delete_last_entry_returns_counter_to_zero(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "MEDICAL_EXPENSE", date(2024, 8, 1), amount="800")
    await async_client.delete(f"{LEDGER_URL}/{resp.json()['id']}", headers=EMPLOYEE_HEADERS)

    record = await _record(async_client)
    assert Decimal(record["used_medical_expense_baht"]) == 0


async def test_update_changes_type_and_resyncs(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "VACATION", date(2024, 9, 2))
    entry_id = resp.json()["id"]

    resp = await async_client.put(
        f"{LEDGER_URL}/{entry_id}",
        json={"entry_type": "SICK", "entry_date": "2024-09-02"},
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["entry_type"] == "SICK"

    record = await _record(async_client)
    assert Decimal(record["used_vacation_day"]) == 0
    assert Decimal(record["used_sick_leave_day"]) == Decimal(1)


async def test_update_across_year_boundary_resyncs_both_years(async_client: AsyncClient) -> None:
    await _onboard(async_client, year=2024)
    await _onboard(async_client, year=2025)
    resp = await _log(async_client, "VACATION", date(2024, 12, 31))
    entry_id = resp.json()["id"]

    resp = await async_client.put(
        f"{LEDGER_URL}/{entry_id}",
        json={"entry_type": "VACATION", "entry_date": "2025-01-02"},
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 200

    assert Decimal((await _record(async_client, 2024))["used_vacation_day"]) == 0
    assert Decimal((await _record(async_client, 2025))["used_vacation_day"]) == Decimal(1)


async def test_update_into_year_without_record_is_rejected(async_client: AsyncClient) -> None:
    await _onboard(async_client, year=2024)
    resp = await _log(async_client, "VACATION", date(2024, 12, 31))
    entry_id = resp.json()["id"]

    resp = await async_client.put(
        f"{LEDGER_URL}/{entry_id}",
        json={"entry_type": "VACATION", "entry_date": "2025-01-02"},
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 404
    assert Decimal((await _record(async_client, 2024))["used_vacation_day"]) == Decimal(1)


async def test_update_uses_the_entry_year_as_stored(async_client: AsyncClient, db_session: AsyncSession) -> None:
    for year in (2024, 2025, 2026):
        await _onboard(async_client, year=year)
    resp = await _log(async_client, "VACATION", date(2024, 6, 3))
    entry_id = uuid.UUID(resp.json()["id"])

    # Another writer moves the entry to 2025 behind this session's back.
    await db_session.execute(
        update(UsageLedgerEntry).where(col(UsageLedgerEntry.id) == entry_id).values(entry_date=date(2025, 6, 2)),
        execution_options={"synchronize_session": False},
    )
    for year in (2024, 2025):
        await recompute_counters(db_session, await get_record_for_update(db_session, COMPANY_ID, EMPLOYEE_ID, year))
    cached = await db_session.get(UsageLedgerEntry, entry_id)
    assert cached is not None
    assert cached.entry_date == date(2024, 6, 3)
    assert Decimal((await _record(async_client, 2025))["used_vacation_day"]) == Decimal(1)

    resp = await async_client.put(
        f"{LEDGER_URL}/{entry_id}",
        json={"entry_type": "VACATION", "entry_date": "2026-06-01"},
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 200

    assert Decimal((await _record(async_client, 2024))["used_vacation_day"]) == 0
    assert Decimal((await _record(async_client, 2025))["used_vacation_day"]) == 0
    assert Decimal((await _record(async_client, 2026))["used_vacation_day"]) == Decimal(1)


# ---------------------------------------------------------------------------
# No auto-create
# ---------------------------------------------------------------------------


async def test_write_without_annual_record_fails(async_client: AsyncClient) -> None:
    resp = await _log(async_client, "VACATION", date(2024, 3, 4))
    assert resp.status_code == 404
    assert resp.json()["error"] == "RecordNotFoundError"

    resp = await async_client.get(EMPLOYEE_RECORDS_URL, headers=AUTH_HEADERS)
    assert resp.json()["total"] == 0


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------


async def test_employee_cannot_log_for_someone_else(async_client: AsyncClient) -> None:
    await _onboard(async_client, employee_id=OTHER_EMPLOYEE_ID)
    resp = await async_client.post(
        LEDGER_URL,
        json={
            "employee_id": str(OTHER_EMPLOYEE_ID),
            "entry_type": "VACATION",
            "entry_date": "2024-03-04",
        },
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 403


async def test_admin_can_log_for_anyone(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "SICK", date(2024, 3, 4), headers=AUTH_HEADERS)
    assert resp.status_code == 201
    assert resp.json()["created_by"] == str(ADMIN_ID)


async def test_employee_cannot_touch_other_entries(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "VACATION", date(2024, 3, 4))
    entry_id = resp.json()["id"]

    intruder = {**EMPLOYEE_HEADERS, "X-User-Id": str(OTHER_EMPLOYEE_ID)}
    assert (await async_client.get(f"{LEDGER_URL}/{entry_id}", headers=intruder)).status_code == 403
    assert (await async_client.delete(f"{LEDGER_URL}/{entry_id}", headers=intruder)).status_code == 403


async def test_get_missing_entry(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"{LEDGER_URL}/{uuid.uuid4()}", headers=AUTH_HEADERS)
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


async def test_list_filters_by_year_and_type(async_client: AsyncClient) -> None:
    await _onboard(async_client, year=2024)
    await _onboard(async_client, year=2025)
    await _log(async_client, "VACATION", date(2024, 5, 1))
    await _log(async_client, "SICK", date(2024, 5, 2))
    await _log(async_client, "VACATION", date(2025, 5, 1))

    resp = await async_client.get(EMPLOYEE_LEDGER_URL, params={"year": 2024}, headers=EMPLOYEE_HEADERS)
    data = resp.json()
    assert data["total"] == 2
    assert [e["entry_date"] for e in data["items"]] == ["2024-05-02", "2024-05-01"]

    resp = await async_client.get(
        EMPLOYEE_LEDGER_URL,
        params={"entry_type": "VACATION"},
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.json()["total"] == 2


# ---------------------------------------------------------------------------
# Holiday calendar
# ---------------------------------------------------------------------------


async def test_holiday_work_on_ordinary_day_rejected(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    resp = await _log(async_client, "HOLIDAY_WORK", date(2024, 3, 4))
    assert resp.status_code == 422
    assert "not a company holiday" in resp.json()["detail"]

    record = await _record(async_client)
    assert Decimal(record["worked_on_holiday_day"]) == 0
    assert Decimal(record["worked_day"]) == 0


async def test_holiday_work_on_company_holiday_accepted(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    await _holiday(async_client, date(2024, 4, 13))

    resp = await _log(async_client, "HOLIDAY_WORK", date(2024, 4, 13))
    assert resp.status_code == 201
    assert Decimal((await _record(async_client))["worked_on_holiday_day"]) == Decimal(1)


async def test_work_on_company_holiday_is_stored_as_holiday_work(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    await _holiday(async_client, date(2024, 4, 13))

    resp = await _log(async_client, "WORK", date(2024, 4, 13))
    assert resp.status_code == 201
    assert resp.json()["entry_type"] == "HOLIDAY_WORK"

    record = await _record(async_client)
    assert Decimal(record["worked_on_holiday_day"]) == Decimal(1)
    assert Decimal(record["worked_day"]) == Decimal(1)


async def test_update_holiday_work_onto_ordinary_day_rejected(async_client: AsyncClient) -> None:
    await _onboard(async_client)
    await _holiday(async_client, date(2024, 4, 13))
    resp = await _log(async_client, "HOLIDAY_WORK", date(2024, 4, 13))
    entry_id = resp.json()["id"]

    resp = await async_client.put(
        f"{LEDGER_URL}/{entry_id}",
        json={"entry_type": "HOLIDAY_WORK", "entry_date": "2024-04-15"},
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 422
    assert Decimal((await _record(async_client))["worked_on_holiday_day"]) == Decimal(1)
