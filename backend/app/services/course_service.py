"""
Course Service Layer
Courses, their syllabus units and who is enrolled in which section
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    CourseNotFoundError,
    ResourceNotFoundError,
    ValidationError,
)
from app.core.types import utcnow
from app.models.class_schedule import ClassSchedule
from app.models.course import Course, CourseUnit, Enrollment
from app.models.user import User, UserRole
from app.schemas.course import CourseCreate, CourseUnitSchema, CourseUpdate, EnrollmentCreate
from app.services.audit_trail import AuditTrail

logger = logging.getLogger("campusops.courses")

COURSE_TARGET = "course"


def _build_units(units: List[CourseUnitSchema]) -> List[CourseUnit]:
    return [CourseUnit(**unit.model_dump()) for unit in units]


def _check_dates(start: date, end: date) -> None:
    if end <= start:
        raise ValidationError("End date must be after start date", field="course_end_date")


def ensure_can_manage(course: Course, actor: User) -> None:
    """Admins manage every course, faculty only the ones they created"""
    if actor.role == UserRole.ADMIN:
        return
    if actor.is_coordinator and str(course.created_by) == str(actor.id):
        return
    raise AuthorizationError("You can only manage courses you created")


class CourseService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditTrail(db)

    async def find(self, course_id: str) -> Optional[Course]:
        result = await self.db.execute(
            select(Course)
            .where(Course.id == str(course_id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_course(self, course_id: str) -> Course:
        course = await self.find(course_id)
        if course is None:
            raise CourseNotFoundError(str(course_id))
        return course

    async def list_courses(self, created_by: Optional[str] = None, search: Optional[str] = None) -> List[Course]:
        query = select(Course)
        if created_by:
            query = query.where(Course.created_by == str(created_by))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                Course.course_name.ilike(pattern)
                | Course.course_code.ilike(pattern)
                | Course.course_description.ilike(pattern)
            )
        result = await self.db.execute(query.order_by(Course.course_code.asc()))
        return list(result.scalars().all())

    async def _ensure_code_free(self, code: str, exclude_id: Optional[str] = None) -> None:
        query = select(Course.id).where(Course.course_code == code)
        if exclude_id:
            query = query.where(Course.id != str(exclude_id))
        if (await self.db.execute(query)).scalar_one_or_none():
            raise ValidationError(f"Course code {code} already exists", field="course_code")

    async def create_course(self, data: CourseCreate, created_by: str) -> Course:
        """
        Create a course with its units.

        Raises:
            ValidationError: duplicate code or end date not after start date
        """
        _check_dates(data.course_start_date, data.course_end_date)
        await self._ensure_code_free(data.course_code)

        course = Course(
            course_code=data.course_code,
            course_name=data.course_name.strip(),
            course_description=data.course_description.strip(),
            start_date=data.course_start_date,
            end_date=data.course_end_date,
            created_by=str(created_by),
            units=_build_units(data.course_units),
            enrollments=[],
        )
        try:
            self.db.add(course)
            await self.db.flush()
            self.audit.record(
                "course_created", COURSE_TARGET, course.id, actor_id=created_by,
                details={"course_code": data.course_code, "units": len(data.course_units)},
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError(f"Course code {data.course_code} already exists", field="course_code")
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Created course {data.course_code} by {created_by}")
        return await self.get_course(course.id)

    async def update_course(self, course_id: str, data: CourseUpdate, actor: User) -> Course:
        course = await self.get_course(course_id)
        ensure_can_manage(course, actor)
        changes = data.model_dump(exclude_unset=True)

        _check_dates(
            changes.get("course_start_date", course.start_date),
            changes.get("course_end_date", course.end_date),
        )
        if "course_code" in changes and changes["course_code"] != course.course_code:
            await self._ensure_code_free(changes["course_code"], exclude_id=course.id)

        try:
            if "course_code" in changes:
                course.course_code = changes["course_code"]
            if "course_name" in changes:
                course.course_name = changes["course_name"].strip()
            if "course_description" in changes:
                course.course_description = changes["course_description"].strip()
            if "course_start_date" in changes:
                course.start_date = changes["course_start_date"]
            if "course_end_date" in changes:
                course.end_date = changes["course_end_date"]
            if data.course_units is not None:
                # old rows must be gone before new ones reuse their unit numbers
                course.units.clear()
                await self.db.flush()
                course.units.extend(_build_units(data.course_units))
            course.modified_by = str(actor.id)
            course.updated_at = utcnow()
            await self.db.flush()

            self.audit.record(
                "course_updated", COURSE_TARGET, course.id, actor_id=actor.id,
                details={"fields": sorted(changes.keys())},
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("Course code already exists", field="course_code")
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_course(course_id)

    async def delete_course(self, course_id: str, actor: User) -> None:
        """Remove a course together with its units, enrollments and class schedules"""
        course = await self.get_course(course_id)
        ensure_can_manage(course, actor)
        code = course.course_code

        try:
            await self.db.execute(delete(ClassSchedule).where(ClassSchedule.course_id == course.id))
            await self.db.delete(course)
            self.audit.record(
                "course_deleted", COURSE_TARGET, course_id, actor_id=actor.id,
                details={"course_code": code},
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Deleted course {code} by {actor.id}")

    async def enroll_student(self, course_id: str, data: EnrollmentCreate, actor: User) -> Course:
        course = await self.get_course(course_id)
        ensure_can_manage(course, actor)

        student = (await self.db.execute(
            select(User).where(User.id == data.student_id)
        )).scalar_one_or_none()
        if student is None or student.role != UserRole.STUDENT:
            raise ValidationError("Enrollments are for student accounts only", field="student_id")
        if any(str(e.student_id) == str(student.id) for e in course.enrollments):
            raise ValidationError("Student is already enrolled in this course", field="student_id")

        try:
            course.enrollments.append(Enrollment(student_id=str(student.id), section=data.section))
            await self.db.flush()
            self.audit.record(
                "course_enrolled", COURSE_TARGET, course.id, actor_id=actor.id,
                details={"student_id": str(student.id), "section": data.section},
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("Student is already enrolled in this course", field="student_id")
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_course(course_id)

    async def unenroll_student(self, course_id: str, student_id: str, actor: User) -> Course:
        course = await self.get_course(course_id)
        ensure_can_manage(course, actor)

        enrollment = next((e for e in course.enrollments if str(e.student_id) == str(student_id)), None)
        if enrollment is None:
            raise ResourceNotFoundError("Enrollment", str(student_id))

        try:
            course.enrollments.remove(enrollment)
            self.audit.record(
                "course_unenrolled", COURSE_TARGET, course.id, actor_id=actor.id,
                details={"student_id": str(student_id)},
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_course(course_id)
