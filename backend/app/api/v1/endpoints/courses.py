"""
Courses API - course catalogue, syllabus units and section enrollments
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.course import Course
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_coordinator
from app.schemas.course import (
    CourseCreate,
    CourseCreator,
    CourseListResponse,
    CourseResponse,
    CourseUnitResponse,
    CourseUpdate,
    EnrollmentCreate,
    EnrollmentResponse,
)
from app.services.course_service import CourseService

router = APIRouter(prefix="/courses", tags=["Courses"])


def build_course_response(course: Course, viewer: User) -> CourseResponse:
    # students only see their own seat
    enrollments = [
        e for e in course.enrollments
        if viewer.is_coordinator or str(e.student_id) == str(viewer.id)
    ]
    return CourseResponse(
        id=str(course.id),
        course_code=course.course_code,
        course_name=course.course_name,
        course_description=course.course_description,
        course_start_date=course.start_date,
        course_end_date=course.end_date,
        course_units=[
            CourseUnitResponse(
                id=str(unit.id),
                unit_number=unit.unit_number,
                unit_name=unit.unit_name,
                unit_description=unit.unit_description,
                assignment_count=unit.assignment_count,
                hours_per_unit=unit.hours_per_unit,
            )
            for unit in course.units
        ],
        course_enrollments=[
            EnrollmentResponse(student_id=str(e.student_id), section=e.section, enrolled_at=e.created_at)
            for e in sorted(enrollments, key=lambda e: e.created_at)
        ],
        created_by=str(course.created_by) if course.created_by else None,
        creator=CourseCreator(
            id=str(course.creator.id), name=course.creator.full_name, email=course.creator.email
        ) if course.creator else None,
        modified_by=str(course.modified_by) if course.modified_by else None,
        created_at=course.created_at,
        updated_at=course.updated_at,
    )


@router.get("", response_model=CourseListResponse)
async def list_courses(
    mine: bool = False,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """All courses; `mine=true` narrows a coordinator to the courses they created"""
    created_by = str(current_user.id) if mine and current_user.is_coordinator else None
    courses = await CourseService(db).list_courses(created_by=created_by, search=search)
    return CourseListResponse(
        courses=[build_course_response(c, current_user) for c in courses],
        total=len(courses),
    )


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    data: CourseCreate,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    course = await CourseService(db).create_course(data, created_by=current_user.id)
    return build_course_response(course, current_user)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(
    course_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return build_course_response(await CourseService(db).get_course(course_id), current_user)


@router.patch("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: str,
    data: CourseUpdate,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    """Edit fields; a course_units list replaces the syllabus"""
    course = await CourseService(db).update_course(course_id, data, current_user)
    return build_course_response(course, current_user)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: str,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    """Deletes the course with its units, enrollments and class schedules"""
    await CourseService(db).delete_course(course_id, current_user)


@router.post("/{course_id}/enrollments", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def enroll_student(
    course_id: str,
    data: EnrollmentCreate,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    course = await CourseService(db).enroll_student(course_id, data, current_user)
    return build_course_response(course, current_user)


@router.delete("/{course_id}/enrollments/{student_id}", response_model=CourseResponse)
async def unenroll_student(
    course_id: str,
    student_id: str,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    course = await CourseService(db).unenroll_student(course_id, student_id, current_user)
    return build_course_response(course, current_user)
