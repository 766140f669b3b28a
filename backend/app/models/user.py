from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class UserRole(str, enum.Enum):
    """User roles"""
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


# Roles allowed to approve, reject, hand out and verify resource requests
COORDINATOR_ROLES = (UserRole.FACULTY, UserRole.ADMIN)


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    hashed_password = Column(String(255), nullable=True)

    role = Column(SQLEnum(UserRole), default=UserRole.STUDENT, nullable=False)
    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    faculty_profile = relationship("Faculty", back_populates="user", uselist=False)
    projects = relationship("Project", back_populates="owner", foreign_keys="Project.owner_id")
    resource_requests = relationship("ResourceRequest", back_populates="user", foreign_keys="ResourceRequest.user_id")

    @property
    def is_coordinator(self) -> bool:
        return self.role in COORDINATOR_ROLES

    def __repr__(self):
        return f"<User {self.email}>"
