"""
Audit Trail - records who moved a request (or an item) and how.

Entries are added to the caller's session, so they commit or roll back with
the change they describe. Each entry is mirrored to the structured log.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.audit_log import AuditLog

REQUEST_TARGET = "resource_request"
ITEM_TARGET = "inventory_item"


class AuditTrail:

    def __init__(self, db: AsyncSession):
        self.db = db

    def record(
        self,
        action: str,
        target_type: str,
        target_id: Optional[str],
        actor_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        entry = AuditLog(
            actor_id=str(actor_id) if actor_id else None,
            action=action,
            target_type=target_type,
            target_id=str(target_id) if target_id else None,
            details=details or {},
            created_at=utcnow(),
        )
        self.db.add(entry)
        return entry

    def record_transition(
        self,
        request_id: str,
        action: str,
        from_status: Optional[str],
        to_status: str,
        actor_id: Optional[str] = None,
        **details: Any,
    ) -> AuditLog:
        """Audit entry plus log line for one lifecycle step"""
        entry = self.record(
            action=f"request_{action}",
            target_type=REQUEST_TARGET,
            target_id=request_id,
            actor_id=actor_id,
            details={"from_status": from_status, "to_status": to_status, **details},
        )
        logger.log_transition(request_id, action, from_status, to_status, actor_id=actor_id)
        return entry

    async def history(self, target_type: str, target_id: str) -> List[AuditLog]:
        """Entries for one target, oldest first"""
        result = await self.db.execute(
            select(AuditLog)
            .where(AuditLog.target_type == target_type, AuditLog.target_id == str(target_id))
            .order_by(AuditLog.created_at.asc())
        )
        return list(result.scalars().all())
