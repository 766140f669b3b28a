"""
Faculty API - staff accounts with their department profile
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.faculty import Faculty
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.schemas.faculty import FacultyCreate, FacultyListResponse, FacultyResponse, FacultyUser
from app.services.faculty_service import FacultyService

router = APIRouter(prefix="/faculty", tags=["Faculty"])


def build_faculty_response(faculty: Faculty) -> FacultyResponse:
    return FacultyResponse(
        id=str(faculty.id),
        user_id=str(faculty.user_id),
        faculty_id=faculty.faculty_code,
        department=faculty.department,
        office=faculty.office,
        specialization=faculty.specialization,
        office_hours=faculty.office_hours,
        profile_photo_url=faculty.profile_photo_url,
        user=FacultyUser(
            id=str(faculty.user.id),
            name=faculty.user.full_name,
            email=faculty.user.email,
            phone=faculty.user.phone,
        ),
    )


@router.get("", response_model=FacultyListResponse)
async def list_faculty(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    faculty = await FacultyService(db).list_faculty()
    return FacultyListResponse(faculty=[build_faculty_response(f) for f in faculty])


@router.post("", response_model=FacultyResponse, status_code=status.HTTP_201_CREATED)
async def create_faculty(
    data: FacultyCreate,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a faculty login and profile together (admin only)"""
    faculty = await FacultyService(db).create_faculty(data, created_by=current_user.id)
    return build_faculty_response(faculty)
