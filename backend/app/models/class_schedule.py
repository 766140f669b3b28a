from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SQLEnum, ForeignKey, Index, String, Time
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class Weekday(str, enum.Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class ClassSchedule(Base):
    """A weekly slot: one course section, taught by one faculty member in one room"""
    __tablename__ = "class_schedules"

    __table_args__ = (
        CheckConstraint('end_time > start_time', name='ck_class_schedules_end_after_start'),
        Index('ix_class_schedules_day_room', 'day_of_week', 'room'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    course_id = Column(GUID, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    faculty_id = Column(GUID, ForeignKey("faculty.id", ondelete="CASCADE"), nullable=False, index=True)

    room = Column(String(100), nullable=False)
    day_of_week = Column(SQLEnum(Weekday), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    section = Column(String(10), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    course = relationship("Course")
    faculty = relationship("Faculty")

    def __repr__(self):
        return f"<ClassSchedule {self.course_id}/{self.section} {self.day_of_week} {self.start_time}>"
