"""Audit trail for meter reading lifecycle events.

Entries are added to the caller's session and committed together with the
change they describe, so a rolled-back transition leaves no audit row.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from suvidha.models.audit_log import AuditLog

METER_READING = "meter_reading"


class AuditService:
    """Static helpers for staging audit entries."""

    @staticmethod
    def log(
        session: AsyncSession,
        entity_type: str,
        entity_id: int,
        action: str,
        actor_id: int | None = None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Stage an audit entry in the session (no flush, no commit).

        Args:
            session: Session of the unit of work being audited
            entity_type: Audited table, e.g. METER_READING
            entity_id: Primary key of the entity
            action: "submit", "verify" or "reject"
            actor_id: User who performed the action; None for system actions
            changes: JSON snapshot of the fields that changed
        """
        entry = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            actor_id=actor_id,
            changes=changes,
        )
        session.add(entry)
        return entry

    @classmethod
    def reading_event(
        cls,
        session: AsyncSession,
        reading_id: int,
        action: str,
        actor_id: int,
        changes: dict[str, Any],
    ) -> AuditLog:
        return cls.log(session, METER_READING, reading_id, action, actor_id, changes)


__all__ = ["METER_READING", "AuditService"]
