"""Audit trail recording shared by the engine services."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.models import AuditEvent


def record_audit(
    session: AsyncSession,
    entity_type: str,
    entity_id: UUID,
    action: str,
    actor: str | None = None,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
) -> AuditEvent:
    """Add an audit event to the session's current unit of work."""
    event = AuditEvent(
        actor=actor,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        before_json=before,
        after_json=after,
    )
    session.add(event)
    return event
