from sqlalchemy import Column, String, DateTime, Text, Integer, ForeignKey, Enum as SQLEnum, CheckConstraint, Index
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class RequestStatus(str, enum.Enum):
    """Resource request status"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COLLECTED = "COLLECTED"
    RETURNED = "RETURNED"


class ResourceRequest(Base):
    """
    A student's request to borrow stock of one inventory item for a project.

    Rows are never deleted; the status column plus the audit log form the
    history of the loan.
    """
    __tablename__ = "resource_requests"

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_resource_requests_quantity_positive"),
        Index('ix_resource_requests_user_status', 'user_id', 'status'),
        Index('ix_resource_requests_item_status', 'item_id', 'status'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    item_id = Column(GUID, ForeignKey("inventory_items.id"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False)
    project_id = Column(GUID, ForeignKey("projects.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    purpose = Column(Text, nullable=False)
    request_date = Column(DateTime, default=utcnow, nullable=False)
    required_date = Column(DateTime, nullable=False)  # expected return date

    status = Column(SQLEnum(RequestStatus), default=RequestStatus.PENDING, nullable=False)
    approved_date = Column(DateTime, nullable=True)
    approved_by = Column(GUID, ForeignKey("users.id"), nullable=True)
    return_date = Column(DateTime, nullable=True)

    # Coordinator check that a self-reported return actually reached the shelf
    return_verified_at = Column(DateTime, nullable=True)
    return_verified_by = Column(GUID, ForeignKey("users.id"), nullable=True)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    item = relationship("InventoryItem", back_populates="requests", lazy="selectin")
    user = relationship("User", back_populates="resource_requests", foreign_keys=[user_id])
    project = relationship("Project", lazy="selectin")

    def __repr__(self):
        return f"<ResourceRequest {self.id} {self.status.value if self.status else '-'}>"
