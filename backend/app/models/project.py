from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text, ForeignKey, Table, Index
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class ProjectStatus(str, enum.Enum):
    """Project status, driven by the faculty approval workflow"""
    PENDING = "PENDING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"
    REJECTED = "REJECTED"


# Components a project declares it needs (wish-list shown on the catalogue)
project_components = Table(
    "project_components",
    Base.metadata,
    Column("project_id", GUID, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("item_id", GUID, ForeignKey("inventory_items.id", ondelete="CASCADE"), primary_key=True),
)


class Project(Base):
    """Student project; only ONGOING projects may draw on inventory"""
    __tablename__ = "projects"

    __table_args__ = (
        Index('ix_projects_owner_status', 'owner_id', 'status'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    owner_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    guide_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(SQLEnum(ProjectStatus), default=ProjectStatus.PENDING, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="projects", foreign_keys=[owner_id])
    guide = relationship("User", foreign_keys=[guide_id])
    components_needed = relationship("InventoryItem", secondary=project_components, lazy="selectin")

    def __repr__(self):
        return f"<Project {self.name} ({self.status.value if self.status else '-'})>"
