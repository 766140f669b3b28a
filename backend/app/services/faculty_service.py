"""
Faculty Service Layer
Creates faculty accounts (user + profile) and lists them
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ValidationError
from app.core.security import get_password_hash
from app.models.faculty import Faculty
from app.models.user import User, UserRole
from app.schemas.faculty import FacultyCreate
from app.services.audit_trail import AuditTrail

logger = logging.getLogger("campusops.faculty")


class FacultyService:
    """Service for faculty-related operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_faculty(self, data: FacultyCreate, created_by: str = None) -> Faculty:
        """
        Create the login account and the faculty profile together.

        Either both rows are written or neither is.

        Raises:
            ValidationError: email or faculty ID already taken
        """
        email = data.email.lower()

        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none():
            raise ValidationError("Email already exists", field="email")

        existing = await self.db.execute(
            select(Faculty.id).where(Faculty.faculty_code == data.faculty_id)
        )
        if existing.scalar_one_or_none():
            raise ValidationError("Faculty ID already exists", field="faculty_id")

        try:
            user = User(
                email=email,
                full_name=data.name,
                phone=data.phone or None,
                hashed_password=get_password_hash(data.password),
                role=UserRole.FACULTY,
                is_active=True,
            )
            self.db.add(user)
            await self.db.flush()

            faculty = Faculty(
                user_id=user.id,
                faculty_code=data.faculty_id,
                department=data.department,
                office=data.office,
                specialization=data.specialization,
                office_hours=data.office_hours,
            )
            self.db.add(faculty)
            await self.db.flush()

            AuditTrail(self.db).record(
                "faculty_created", "faculty", faculty.id, actor_id=created_by,
                details={"faculty_id": data.faculty_id, "email": email},
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            # lost a race with a concurrent create for the same email/ID
            raise ValidationError("Email or faculty ID already exists")
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Created faculty {data.faculty_id} ({email})")
        return await self.get_faculty(faculty.id)

    async def get_faculty(self, faculty_id: str) -> Faculty:
        result = await self.db.execute(
            select(Faculty)
            .options(selectinload(Faculty.user))
            .where(Faculty.id == str(faculty_id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def list_faculty(self) -> List[Faculty]:
        result = await self.db.execute(
            select(Faculty)
            .options(selectinload(Faculty.user))
            .order_by(Faculty.created_at.asc())
        )
        return list(result.scalars().all())
