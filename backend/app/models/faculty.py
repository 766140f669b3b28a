"""
Faculty Model - Staff profile attached one-to-one to a User with the faculty role
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class Faculty(Base):
    """Faculty profile"""
    __tablename__ = "faculty"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    # Staff number printed on the ID card, also used for the profile photo URL
    faculty_code = Column(String(50), nullable=False, unique=True, index=True)
    department = Column(String(255), nullable=False)
    office = Column(String(255), nullable=False)
    specialization = Column(String(255), nullable=False)
    office_hours = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="faculty_profile")

    @property
    def profile_photo_url(self) -> str:
        return f"/profile-img/{self.faculty_code}"

    def __repr__(self):
        return f"<Faculty {self.faculty_code}>"
