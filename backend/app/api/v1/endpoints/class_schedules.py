"""
Class Schedules API - weekly timetable slots per course section
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import AuthorizationError
from app.models.class_schedule import ClassSchedule
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_coordinator
from app.schemas.class_schedule import (
    ClassScheduleCreate,
    ClassScheduleListResponse,
    ClassScheduleResponse,
    ScheduleCourse,
    ScheduleFaculty,
)
from app.services.class_schedule_service import ClassScheduleService

router = APIRouter(prefix="/class-schedules", tags=["Class Schedules"])


def build_schedule_response(schedule: ClassSchedule) -> ClassScheduleResponse:
    faculty = schedule.faculty
    return ClassScheduleResponse(
        id=str(schedule.id),
        course_id=str(schedule.course_id),
        course=ScheduleCourse(
            id=str(schedule.course.id),
            course_code=schedule.course.course_code,
            course_name=schedule.course.course_name,
        ),
        faculty_id=str(schedule.faculty_id),
        faculty=ScheduleFaculty(
            id=str(faculty.id),
            faculty_id=faculty.faculty_code,
            name=faculty.user.full_name,
            email=faculty.user.email,
            department=faculty.department,
        ),
        room=schedule.room,
        day_of_week=schedule.day_of_week,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        section=schedule.section,
        created_at=schedule.created_at,
        updated_at=schedule.updated_at,
    )


@router.get("", response_model=ClassScheduleListResponse)
async def list_schedules(
    faculty_id: Optional[str] = None,
    course_id: Optional[str] = None,
    student_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Filter by faculty_id, course_id or student_id (first one given wins).

    Students may browse by faculty or course; otherwise they get their own
    timetable and cannot ask for another student's.
    """
    if not current_user.is_coordinator:
        if student_id and student_id != str(current_user.id):
            raise AuthorizationError("You can only view your own timetable")
        if not (faculty_id or course_id):
            student_id = str(current_user.id)

    schedules = await ClassScheduleService(db).list_schedules(
        faculty_id=faculty_id, course_id=course_id, student_id=student_id
    )
    return ClassScheduleListResponse(
        schedules=[build_schedule_response(s) for s in schedules],
        total=len(schedules),
    )


@router.post("", response_model=ClassScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    data: ClassScheduleCreate,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    schedule = await ClassScheduleService(db).create_schedule(data, actor_id=current_user.id)
    return build_schedule_response(schedule)


@router.get("/{schedule_id}", response_model=ClassScheduleResponse)
async def get_schedule(
    schedule_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return build_schedule_response(await ClassScheduleService(db).get_schedule(schedule_id))


@router.put("/{schedule_id}", response_model=ClassScheduleResponse)
async def replace_schedule(
    schedule_id: str,
    data: ClassScheduleCreate,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    schedule = await ClassScheduleService(db).replace_schedule(schedule_id, data, actor_id=current_user.id)
    return build_schedule_response(schedule)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(
    schedule_id: str,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    await ClassScheduleService(db).delete_schedule(schedule_id, actor_id=current_user.id)
