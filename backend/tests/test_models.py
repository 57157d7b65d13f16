from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from annual_quota.models import (
    AnnualRecord,
    AuditLog,
    LedgerEntryType,
    QuotaPlan,
    RecordState,
    SQLModel,
    UsageLedgerEntry,
)

EXPECTED_TABLES = {
    "annual_record",
    "audit_log",
    "company_holiday",
    "quota_plan",
    "usage_ledger_entry",
}


def test_all_tables_registered() -> None:
    assert EXPECTED_TABLES.issubset(set(SQLModel.metadata.tables.keys()))


def test_annual_record_defaults() -> None:
    record = AnnualRecord(company_id=uuid.uuid4(), employee_id=uuid.uuid4(), year=2025)
    assert record.id is not None
    assert record.quota_plan_id is None
    assert record.state == RecordState.BOOTSTRAPPED
    assert record.rollover_vacation_day == Decimal(0)
    assert record.used_medical_expense_baht == Decimal(0)
    assert record.version == 1


def test_annual_record_unique_per_employee_year() -> None:
    table = SQLModel.metadata.tables["annual_record"]
    unique_columns = {
        tuple(c.name for c in constraint.columns)
        for constraint in table.constraints
        if constraint.__class__.__name__ == "UniqueConstraint"
    }
    assert ("company_id", "employee_id", "year") in unique_columns


def test_annual_record_plan_fk_restricts_delete() -> None:
    column = SQLModel.metadata.tables["annual_record"].c.quota_plan_id
    (fk,) = column.foreign_keys
    assert fk.target_fullname == "quota_plan.id"
    assert fk.ondelete == "RESTRICT"
    assert column.nullable


def test_quota_plan_instantiation() -> None:
    plan = QuotaPlan(
        company_id=uuid.uuid4(),
        plan_name="Standard",
        year=2025,
        quota_vacation_day=Decimal(18),
        quota_medical_expense_baht=Decimal(12000),
        created_by=uuid.uuid4(),
    )
    assert plan.plan_name == "Standard"
    assert plan.id is not None


def test_usage_ledger_entry_instantiation() -> None:
    entry = UsageLedgerEntry(
        company_id=uuid.uuid4(),
        employee_id=uuid.uuid4(),
        entry_type=LedgerEntryType.MEDICAL_EXPENSE,
        entry_date=date(2025, 2, 3),
        amount=Decimal("450.75"),
        receipt_name="pharmacy.jpg",
        created_by=uuid.uuid4(),
    )
    assert entry.note is None
    assert entry.amount == Decimal("450.75")


def test_audit_log_instantiation() -> None:
    log = AuditLog(
        company_id=uuid.uuid4(),
        actor_id=uuid.uuid4(),
        entity_type="ANNUAL_RECORD",
        entity_id=uuid.uuid4(),
        action="ROLLOVER",
        after_json={"year": 2025},
    )
    assert log.before_json is None
    assert log.after_json == {"year": 2025}
