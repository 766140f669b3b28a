"""
Component Requests API - borrow lab components and library items for a project

Students raise and return requests; faculty and admins approve, reject, hand
out and verify returns. Lifecycle errors (CampusOpsError) propagate to the
application handler, which renders the typed error body.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthorizationError
from app.core.logging_config import logger
from app.core.rate_limiter import request_create_rate_limit
from app.core.types import utcnow
from app.models.inventory import ItemKind
from app.models.resource_request import RequestStatus, ResourceRequest
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_coordinator
from app.schemas.resource_request import (
    AuditEntryResponse,
    RequestItemSummary,
    RequestProjectSummary,
    ResourceRequestCreate,
    ResourceRequestListResponse,
    ResourceRequestResponse,
    ResourceRequestStatusUpdate,
)
from app.services.request_lifecycle import RequestLifecycleService
from app.services.status_classifier import is_request_overdue, overdue_days


router = APIRouter(prefix="/component-requests", tags=["Component Requests"])


def build_request_response(request: ResourceRequest, now=None) -> ResourceRequestResponse:
    """Serialise a request with its derived overdue state"""
    now = now or utcnow()
    overdue = is_request_overdue(request.status, request.required_date, now)

    component = None
    if request.item is not None:
        item = request.item
        component = RequestItemSummary(
            id=str(item.id),
            name=item.name,
            kind=item.kind.value,
            category=item.category,
            location=item.location,
            available_quantity=item.available_quantity,
            total_quantity=item.total_quantity,
        )

    project = None
    if request.project is not None:
        project = RequestProjectSummary(
            id=str(request.project.id),
            name=request.project.name,
            status=request.project.status.value,
        )

    return ResourceRequestResponse(
        id=str(request.id),
        component_id=str(request.item_id),
        user_id=str(request.user_id),
        project_id=str(request.project_id),
        quantity=request.quantity,
        purpose=request.purpose,
        request_date=request.request_date,
        required_date=request.required_date,
        status=request.status,
        approved_date=request.approved_date,
        approved_by=str(request.approved_by) if request.approved_by else None,
        return_date=request.return_date,
        return_verified=request.return_verified_at is not None,
        return_verified_at=request.return_verified_at,
        notes=request.notes,
        is_overdue=overdue,
        overdue_days=overdue_days(request.required_date, now) if overdue else 0,
        component=component,
        project=project,
    )


def _ensure_can_view(request: ResourceRequest, user: User) -> None:
    if not user.is_coordinator and str(request.user_id) != str(user.id):
        raise AuthorizationError("You can only view your own requests")


@router.post("", response_model=ResourceRequestResponse, status_code=status.HTTP_201_CREATED)
@request_create_rate_limit()
async def create_component_request(
    request: Request,
    data: ResourceRequestCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Request stock of an item for an ongoing project; reserves it immediately"""
    service = RequestLifecycleService(db)
    created = await service.create_request(current_user.id, data)
    logger.info(
        f"User {current_user.id} requested {created.quantity} x {created.item_id} "
        f"for project {created.project_id}"
    )
    return build_request_response(created)


@router.get("", response_model=ResourceRequestListResponse)
async def list_component_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    kind: Optional[ItemKind] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=settings.MAX_REQUEST_PAGE_SIZE),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Own requests for students, every request for faculty and admins"""
    service = RequestLifecycleService(db)
    user_filter = None if current_user.is_coordinator else current_user.id
    requests, total = await service.list_requests(
        user_id=user_filter, status=status_filter, kind=kind, skip=skip, limit=limit
    )
    now = utcnow()
    return ResourceRequestListResponse(
        requests=[build_request_response(r, now) for r in requests],
        total=total,
    )


@router.get("/overdue", response_model=List[ResourceRequestResponse])
async def list_overdue_requests(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Approved or collected requests past their required date"""
    service = RequestLifecycleService(db)
    now = utcnow()
    user_filter = None if current_user.is_coordinator else current_user.id
    overdue = await service.list_overdue(now=now, user_id=user_filter)
    return [build_request_response(r, now) for r in overdue]


@router.get("/{request_id}", response_model=ResourceRequestResponse)
async def get_component_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = RequestLifecycleService(db)
    found = await service.get_request(request_id)
    _ensure_can_view(found, current_user)
    return build_request_response(found)


@router.patch("/{request_id}", response_model=ResourceRequestResponse)
async def update_component_request(
    request_id: str,
    update_data: ResourceRequestStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Move a request to a new status.

    APPROVED/REJECTED/COLLECTED need a coordinator; RETURNED may come from
    the requester (self-reported, with an optional return_date).
    """
    service = RequestLifecycleService(db)
    updated = await service.apply_status_update(request_id, current_user, update_data)
    return build_request_response(updated)


@router.post("/{request_id}/verify-return", response_model=ResourceRequestResponse)
async def verify_component_return(
    request_id: str,
    current_user: User = Depends(get_current_coordinator),
    db: AsyncSession = Depends(get_db)
):
    """Confirm a returned request's stock is back on the shelf"""
    service = RequestLifecycleService(db)
    verified = await service.verify_return(request_id, current_user.id)
    return build_request_response(verified)


@router.get("/{request_id}/history", response_model=List[AuditEntryResponse])
async def get_component_request_history(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Audit entries for the request, oldest first"""
    service = RequestLifecycleService(db)
    found = await service.get_request(request_id)
    _ensure_can_view(found, current_user)
    entries = await service.history(request_id)
    return [
        AuditEntryResponse(
            id=str(e.id),
            action=e.action,
            actor_id=str(e.actor_id) if e.actor_id else None,
            details=e.details,
            created_at=e.created_at,
        )
        for e in entries
    ]
