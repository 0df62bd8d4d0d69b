"""Audit service - Append member and administrator actions to the audit log."""

from uuid import UUID

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.audit_log import AuditLog


class AuditService:
    """Service class for audit log entries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log_action(
        self,
        action: str,
        entity_type: str,
        user_id: UUID | None = None,
        entity_id: UUID | None = None,
        details: str | None = None,
        ip_address: str | None = None,
    ) -> AuditLog:
        """Record an action; it commits together with the request's other writes."""
        entry = AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
            ip_address=ip_address,
        )
        self.db.add(entry)
        logfire.info("audit", action=action, entity_type=entity_type, entity_id=str(entity_id))
        return entry
