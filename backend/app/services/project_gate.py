"""
Project Gate - answers whether a project may draw on inventory.

Project status belongs to the faculty approval workflow and can change between
two requests, so every question goes to the database.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ProjectNotFoundError
from app.models.project import Project, ProjectStatus


class ProjectGate:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_project(self, project_id: str) -> Project:
        result = await self.db.execute(
            select(Project)
            .where(Project.id == str(project_id))
            .execution_options(populate_existing=True)
        )
        project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError(str(project_id))
        return project

    async def is_approved(self, project_id: str) -> bool:
        """True iff the project is ONGOING"""
        result = await self.db.execute(
            select(Project.status).where(Project.id == str(project_id))
        )
        status = result.scalar_one_or_none()
        return status == ProjectStatus.ONGOING
