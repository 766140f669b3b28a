"""
Class Schedule Service - weekly timetable slots

A slot belongs to one course section and one faculty member. Two slots on
the same day may not overlap in the same room or for the same faculty
member. Listing follows the timetable views: by faculty, by course, or a
student's own timetable through their enrollments.
"""

from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import (
    CourseNotFoundError,
    FacultyNotFoundError,
    ScheduleConflictError,
    ScheduleNotFoundError,
    ValidationError,
)
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.class_schedule import ClassSchedule, Weekday
from app.models.course import Course, Enrollment
from app.models.faculty import Faculty
from app.schemas.class_schedule import ClassScheduleCreate
from app.services.audit_trail import AuditTrail
from app.services.specifications import format_location

SCHEDULE_TARGET = "class_schedule"

WEEK_ORDER = {day: position for position, day in enumerate(Weekday)}

_LOAD_OPTIONS = (
    selectinload(ClassSchedule.course),
    selectinload(ClassSchedule.faculty).selectinload(Faculty.user),
)


def sort_by_week(schedules: List[ClassSchedule]) -> List[ClassSchedule]:
    return sorted(schedules, key=lambda s: (WEEK_ORDER[s.day_of_week], s.start_time, s.room))


class ClassScheduleService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditTrail(db)

    async def get_schedule(self, schedule_id: str) -> ClassSchedule:
        result = await self.db.execute(
            select(ClassSchedule)
            .options(*_LOAD_OPTIONS)
            .where(ClassSchedule.id == str(schedule_id))
            .execution_options(populate_existing=True)
        )
        schedule = result.scalar_one_or_none()
        if schedule is None:
            raise ScheduleNotFoundError(str(schedule_id))
        return schedule

    async def list_schedules(
        self,
        faculty_id: Optional[str] = None,
        course_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> List[ClassSchedule]:
        """
        Only the first filter given applies, in the order faculty, course,
        student. A student sees the slots of the sections they are enrolled in.
        """
        query = select(ClassSchedule).options(*_LOAD_OPTIONS)
        if faculty_id:
            query = query.where(ClassSchedule.faculty_id == str(faculty_id))
        elif course_id:
            query = query.where(ClassSchedule.course_id == str(course_id))
        elif student_id:
            seats = (await self.db.execute(
                select(Enrollment.course_id, Enrollment.section)
                .where(Enrollment.student_id == str(student_id))
            )).all()
            if not seats:
                return []
            query = query.where(or_(*[
                and_(ClassSchedule.course_id == seat.course_id, ClassSchedule.section == seat.section)
                for seat in seats
            ]))

        result = await self.db.execute(query)
        return sort_by_week(list(result.scalars().all()))

    async def create_schedule(self, data: ClassScheduleCreate, actor_id: str) -> ClassSchedule:
        """
        Raises:
            CourseNotFoundError / FacultyNotFoundError: unknown references
            ValidationError: end time not after start time
            ScheduleConflictError: room or faculty member already booked
        """
        room = await self._check_slot(data)

        schedule = ClassSchedule(
            course_id=data.course_id,
            faculty_id=data.faculty_id,
            room=room,
            day_of_week=data.day_of_week,
            start_time=data.start_time,
            end_time=data.end_time,
            section=data.section,
        )
        try:
            self.db.add(schedule)
            await self.db.flush()
            self.audit.record(
                "schedule_created", SCHEDULE_TARGET, schedule.id, actor_id=actor_id,
                details={"course_id": data.course_id, "section": data.section, "room": room},
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Scheduled {data.course_id}/{data.section} on {data.day_of_week.value} in {room}")
        return await self.get_schedule(schedule.id)

    async def replace_schedule(self, schedule_id: str, data: ClassScheduleCreate, actor_id: str) -> ClassSchedule:
        schedule = await self.get_schedule(schedule_id)
        room = await self._check_slot(data, exclude_id=schedule.id)

        try:
            schedule.course_id = data.course_id
            schedule.faculty_id = data.faculty_id
            schedule.room = room
            schedule.day_of_week = data.day_of_week
            schedule.start_time = data.start_time
            schedule.end_time = data.end_time
            schedule.section = data.section
            schedule.updated_at = utcnow()
            self.audit.record("schedule_updated", SCHEDULE_TARGET, schedule.id, actor_id=actor_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_schedule(schedule_id)

    async def delete_schedule(self, schedule_id: str, actor_id: str) -> None:
        schedule = await self.get_schedule(schedule_id)
        try:
            await self.db.delete(schedule)
            self.audit.record("schedule_deleted", SCHEDULE_TARGET, schedule_id, actor_id=actor_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def _check_slot(self, data: ClassScheduleCreate, exclude_id: Optional[str] = None) -> str:
        """Validate a slot and return its normalised room label"""
        if data.end_time <= data.start_time:
            raise ValidationError("End time must be after start time", field="end_time")

        course = (await self.db.execute(
            select(Course.id).where(Course.id == data.course_id)
        )).scalar_one_or_none()
        if course is None:
            raise CourseNotFoundError(data.course_id)

        faculty = (await self.db.execute(
            select(Faculty.id).where(Faculty.id == data.faculty_id)
        )).scalar_one_or_none()
        if faculty is None:
            raise FacultyNotFoundError(data.faculty_id)

        room = format_location(data.room)
        query = select(ClassSchedule).where(
            ClassSchedule.day_of_week == data.day_of_week,
            ClassSchedule.start_time < data.end_time,
            ClassSchedule.end_time > data.start_time,
            or_(ClassSchedule.room == room, ClassSchedule.faculty_id == data.faculty_id),
        )
        if exclude_id:
            query = query.where(ClassSchedule.id != str(exclude_id))
        clash = (await self.db.execute(query.limit(1))).scalar_one_or_none()
        if clash is not None:
            if clash.room == room:
                raise ScheduleConflictError(
                    "room", str(clash.id),
                    f"{room} is already booked on {data.day_of_week.value} "
                    f"{clash.start_time:%H:%M}-{clash.end_time:%H:%M}",
                )
            raise ScheduleConflictError(
                "faculty", str(clash.id),
                f"Faculty member already teaches on {data.day_of_week.value} "
                f"{clash.start_time:%H:%M}-{clash.end_time:%H:%M}",
            )
        return room
