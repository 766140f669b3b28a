"""
Course Models - courses with their syllabus units and student enrollments
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class Course(Base):
    """A course offering; its class schedules live in class_schedules"""
    __tablename__ = "courses"

    __table_args__ = (
        CheckConstraint('end_date > start_date', name='ck_courses_end_after_start'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    course_code = Column(String(50), nullable=False, unique=True, index=True)
    course_name = Column(String(255), nullable=False)
    course_description = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    modified_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    creator = relationship("User", foreign_keys=[created_by], lazy="selectin")
    units = relationship(
        "CourseUnit",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseUnit.unit_number",
        lazy="selectin",
    )
    enrollments = relationship(
        "Enrollment",
        back_populates="course",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Course {self.course_code}>"


class CourseUnit(Base):
    """One syllabus unit of a course"""
    __tablename__ = "course_units"

    __table_args__ = (
        UniqueConstraint('course_id', 'unit_number', name='uq_course_units_course_number'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    course_id = Column(GUID, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    unit_number = Column(Integer, nullable=False)
    unit_name = Column(String(255), nullable=False)
    unit_description = Column(Text, nullable=False)
    assignment_count = Column(Integer, default=0, nullable=False)
    hours_per_unit = Column(Integer, default=1, nullable=False)

    course = relationship("Course", back_populates="units")


class Enrollment(Base):
    """A student's seat in one section of a course"""
    __tablename__ = "enrollments"

    __table_args__ = (
        UniqueConstraint('course_id', 'student_id', name='uq_enrollments_course_student'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    course_id = Column(GUID, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    section = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    course = relationship("Course", back_populates="enrollments")

    def __repr__(self):
        return f"<Enrollment {self.student_id} in {self.course_id}/{self.section}>"
