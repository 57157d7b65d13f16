from sqlmodel import SQLModel

from annual_quota.models.annual_record import AnnualRecord
from annual_quota.models.audit import AuditLog
from annual_quota.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from annual_quota.models.enums import (
    AuditAction,
    AuditEntityType,
    LedgerEntryType,
    RecordState,
    RolloverStatus,
)
from annual_quota.models.holiday import CompanyHoliday
from annual_quota.models.ledger import UsageLedgerEntry
from annual_quota.models.quota_plan import QuotaPlan

__all__ = [
    "AnnualRecord",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "CompanyHoliday",
    "LedgerEntryType",
    "QuotaPlan",
    "RecordState",
    "RolloverStatus",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
    "UpdatedAtMixin",
    "UsageLedgerEntry",
]
