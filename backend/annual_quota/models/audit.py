# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from annual_quota.models.base import TimestampMixin, UUIDBase


class AuditLog(UUIDBase, TimestampMixin, table=True):
    """Append-only trail of plan, record and ledger mutations.

    ``actor_id`` is the nil UUID for unattended jobs such as the rollover sweep.
    """

    __tablename__ = "audit_log"
    __table_args__ = (
        sa.Index("ix_audit_entity", "entity_type", "entity_id"),
        sa.Index("ix_audit_company_created", "company_id", "created_at"),
    )

    company_id: uuid.UUID
    actor_id: uuid.UUID
    entity_type: str = Field(max_length=50)
    entity_id: uuid.UUID
    action: str = Field(max_length=50)
    before_json: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    after_json: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
