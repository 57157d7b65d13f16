from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from annual_quota.models.audit import AuditLog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from annual_quota.models.enums import AuditAction, AuditEntityType

SYSTEM_ACTOR = uuid.UUID(int=0)


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Snapshot a row as JSON-safe data (UUIDs, dates and Decimals become strings)."""
    return model.model_dump(mode="json")


async def write_audit_log(
    session: AsyncSession,
    *,
    company_id: uuid.UUID,
    actor_id: uuid.UUID,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Stage an audit row in the caller's transaction; the caller commits."""
    entry = AuditLog(
        company_id=company_id,
        actor_id=actor_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry
