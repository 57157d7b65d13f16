from __future__ import annotations

import enum


class LedgerEntryType(enum.StrEnum):
    """Kind of usage recorded in the ledger."""

    VACATION = "VACATION"
    SICK = "SICK"
    PERSONAL = "PERSONAL"
    OTHER = "OTHER"
    WORK = "WORK"
    HOLIDAY_WORK = "HOLIDAY_WORK"
    MEDICAL_EXPENSE = "MEDICAL_EXPENSE"


class RecordState(enum.StrEnum):
    """How an annual record came into existence.

    A (employee, year) with no row is the implicit NO_RECORD state.
    """

    BOOTSTRAPPED = "BOOTSTRAPPED"
    ROLLED_OVER = "ROLLED_OVER"


class RolloverStatus(enum.StrEnum):
    """Per-employee outcome of a rollover sweep."""

    BOOTSTRAPPED = "BOOTSTRAPPED"
    ROLLED_OVER = "ROLLED_OVER"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    QUOTA_PLAN = "QUOTA_PLAN"
    ANNUAL_RECORD = "ANNUAL_RECORD"
    LEDGER_ENTRY = "LEDGER_ENTRY"
    HOLIDAY = "HOLIDAY"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    RESYNC = "RESYNC"
    ROLLOVER = "ROLLOVER"
