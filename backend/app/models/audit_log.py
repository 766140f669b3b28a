from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class AuditLog(Base):
    """Audit log for request transitions and catalogue changes"""
    __tablename__ = "audit_logs"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    actor_id = Column(GUID, ForeignKey("users.id"), nullable=True, index=True)

    # Action details
    action = Column(String(100), nullable=False)  # e.g., 'request_approve', 'item_updated'
    target_type = Column(String(50), nullable=False)  # e.g., 'resource_request', 'inventory_item', 'project'
    target_id = Column(GUID, nullable=True, index=True)

    # Change details (from/to status, quantities, notes)
    details = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    actor = relationship("User", foreign_keys=[actor_id])

    def __repr__(self):
        return f"<AuditLog {self.action} by {self.actor_id}>"
