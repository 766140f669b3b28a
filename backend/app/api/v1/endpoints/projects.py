from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import AuthorizationError, ItemNotFoundError, ValidationError
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.inventory import InventoryItem
from app.models.project import Project, ProjectStatus
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_coordinator
from app.schemas.project import (
    ProjectComponent,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectStatusUpdate,
)
from app.services.audit_trail import AuditTrail
from app.services.project_gate import ProjectGate

router = APIRouter(prefix="/projects", tags=["Projects"])


def build_project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=str(project.id),
        name=project.name,
        description=project.description,
        owner_id=str(project.owner_id),
        guide_id=str(project.guide_id) if project.guide_id else None,
        status=project.status,
        components_needed=[
            ProjectComponent(id=str(item.id), name=item.name)
            for item in project.components_needed
        ],
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    status_filter: Optional[ProjectStatus] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Own projects for students, all projects for faculty and admins"""
    query = select(Project)
    if not current_user.is_coordinator:
        query = query.where(Project.owner_id == str(current_user.id))
    if status_filter is not None:
        query = query.where(Project.status == status_filter)

    result = await db.execute(query.order_by(Project.created_at.desc()))
    projects = result.scalars().all()
    return ProjectListResponse(
        projects=[build_project_response(p) for p in projects],
        total=len(projects),
    )


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Propose a project; it waits in PENDING until a coordinator approves it"""
    if data.guide_id:
        guide = (await db.execute(select(User).where(User.id == data.guide_id))).scalar_one_or_none()
        if guide is None or not guide.is_coordinator:
            raise ValidationError("Guide must be a faculty member", field="guide_id")

    components = []
    for item_id in dict.fromkeys(data.component_ids):
        item = (await db.execute(
            select(InventoryItem).where(InventoryItem.id == item_id)
        )).scalar_one_or_none()
        if item is None:
            raise ItemNotFoundError(item_id)
        components.append(item)

    project = Project(
        owner_id=str(current_user.id),
        guide_id=data.guide_id,
        name=data.name.strip(),
        description=data.description,
        status=ProjectStatus.PENDING,
    )
    project.components_needed = components
    db.add(project)
    await db.commit()

    logger.info(f"User {current_user.id} created project {project.id}")
    return build_project_response(await ProjectGate(db).get_project(project.id))


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    project = await ProjectGate(db).get_project(project_id)
    if not current_user.is_coordinator and str(project.owner_id) != str(current_user.id):
        raise AuthorizationError("You can only view your own projects")
    return build_project_response(project)


@router.patch("/{project_id}/status", response_model=ProjectResponse)
async def update_project_status(
    project_id: str,
    update_data: ProjectStatusUpdate,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    """Approve (ONGOING), reject, complete or flag a project"""
    gate = ProjectGate(db)
    project = await gate.get_project(project_id)
    previous = project.status

    project.status = update_data.status
    project.updated_at = utcnow()
    AuditTrail(db).record(
        "project_status_changed", "project", project.id, actor_id=current_user.id,
        details={"from_status": previous.value, "to_status": update_data.status.value},
    )
    await db.commit()

    logger.info(f"Project {project_id}: {previous.value} -> {update_data.status.value} by {current_user.id}")
    return build_project_response(await gate.get_project(project_id))
