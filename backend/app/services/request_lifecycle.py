"""
Request Lifecycle Service - borrowing stock for a project

    PENDING --approve--> APPROVED --collect--> COLLECTED --confirm_return--> RETURNED
    PENDING --reject---> REJECTED
    RETURNED --verify_return--> RETURNED (return_verified_at stamped)

Stock is reserved when the request is created and released on reject or
return. Every status change is an UPDATE guarded by the expected current
status, so of two racing calls exactly one wins and the other sees
InvalidTransitionError. The stock movement and the audit entry for a
transition commit in the same transaction as the status change; on any
failure the whole unit is rolled back and the error propagates.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    ProjectNotApprovedError,
    RequestNotFoundError,
    ValidationError,
)
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.inventory import InventoryItem, ItemKind
from app.models.resource_request import RequestStatus, ResourceRequest
from app.models.user import User
from app.schemas.resource_request import ResourceRequestCreate, ResourceRequestStatusUpdate
from app.services.audit_trail import REQUEST_TARGET, AuditTrail
from app.services.inventory_store import InventoryStore
from app.services.project_gate import ProjectGate
from app.services.status_classifier import OUTSTANDING_STATUSES

# action -> (required status, resulting status)
TRANSITIONS: Dict[str, Tuple[RequestStatus, RequestStatus]] = {
    "approve": (RequestStatus.PENDING, RequestStatus.APPROVED),
    "reject": (RequestStatus.PENDING, RequestStatus.REJECTED),
    "collect": (RequestStatus.APPROVED, RequestStatus.COLLECTED),
    "confirm_return": (RequestStatus.COLLECTED, RequestStatus.RETURNED),
}

# Transitions that hand the reserved stock back to the shelf
RELEASING_ACTIONS = frozenset({"reject", "confirm_return"})


class RequestLifecycleService:
    """Creates resource requests and moves them through their states"""

    def __init__(
        self,
        db: AsyncSession,
        gate: Optional[ProjectGate] = None,
        store: Optional[InventoryStore] = None,
        audit: Optional[AuditTrail] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db
        self.gate = gate or ProjectGate(db)
        self.store = store or InventoryStore(db)
        self.audit = audit or AuditTrail(db)
        self.clock = clock or utcnow

    # ==================== CREATE ====================

    async def create_request(self, user_id: str, data: ResourceRequestCreate) -> ResourceRequest:
        """
        Admit a new request and reserve its stock.

        Raises:
            ValidationError: bad quantity/purpose/date, foreign project, inactive item
            ProjectNotFoundError / ItemNotFoundError: unknown references
            ProjectNotApprovedError: project is not ONGOING
            InsufficientStockError: quantity exceeds what is on the shelf
        """
        _validate_new_request(data)

        try:
            project = await self.gate.get_project(data.project_id)
            if str(user_id) not in (str(project.owner_id), str(project.guide_id)):
                raise ValidationError(
                    "You can only request components for your own projects",
                    field="project_id",
                )
            if not await self.gate.is_approved(project.id):
                raise ProjectNotApprovedError(str(project.id), project.status.value)

            item = await self.store.get(data.component_id)
            if not item.is_active:
                raise ValidationError(f"{item.name} is no longer available for requests", field="component_id")

            await self.store.reserve(item.id, data.quantity)

            request = ResourceRequest(
                item_id=item.id,
                user_id=str(user_id),
                project_id=project.id,
                quantity=data.quantity,
                purpose=data.purpose.strip(),
                request_date=self.clock(),
                required_date=data.required_date,
                status=RequestStatus.PENDING,
                notes=data.notes,
            )
            self.db.add(request)
            await self.db.flush()

            self.audit.record_transition(
                request.id,
                "create",
                None,
                RequestStatus.PENDING.value,
                actor_id=user_id,
                item_id=str(item.id),
                quantity=data.quantity,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_request(request.id)

    # ==================== TRANSITIONS ====================

    async def approve(self, request_id: str, actor_id: str, notes: Optional[str] = None) -> ResourceRequest:
        values = {"approved_date": self.clock(), "approved_by": str(actor_id)}
        if notes is not None:
            values["notes"] = notes
        return await self._transition(request_id, "approve", actor_id, values)

    async def reject(self, request_id: str, actor_id: str, notes: Optional[str] = None) -> ResourceRequest:
        values = {"notes": notes} if notes is not None else {}
        return await self._transition(request_id, "reject", actor_id, values)

    async def collect(self, request_id: str, actor_id: str) -> ResourceRequest:
        return await self._transition(request_id, "collect", actor_id, {})

    async def confirm_return(
        self,
        request_id: str,
        actor_id: str,
        return_date: Optional[datetime] = None,
    ) -> ResourceRequest:
        values = {"return_date": return_date or self.clock()}
        return await self._transition(request_id, "confirm_return", actor_id, values)

    async def verify_return(self, request_id: str, actor_id: str) -> ResourceRequest:
        """Coordinator acknowledges a self-reported return; allowed once"""
        verified_at = self.clock()
        try:
            result = await self.db.execute(
                update(ResourceRequest)
                .where(
                    ResourceRequest.id == str(request_id),
                    ResourceRequest.status == RequestStatus.RETURNED,
                    ResourceRequest.return_verified_at.is_(None),
                )
                .values(
                    return_verified_at=verified_at,
                    return_verified_by=str(actor_id),
                    updated_at=verified_at,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                current = await self._find(request_id)
                if current is None:
                    raise RequestNotFoundError(str(request_id))
                state = current.status.value
                if current.return_verified_at is not None:
                    state = f"{state} (verified)"
                raise InvalidTransitionError(str(request_id), state, "verify_return")

            self.audit.record_transition(
                str(request_id),
                "verify_return",
                RequestStatus.RETURNED.value,
                RequestStatus.RETURNED.value,
                actor_id=actor_id,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_request(request_id)

    async def apply_status_update(
        self,
        request_id: str,
        actor: User,
        update_data: ResourceRequestStatusUpdate,
    ) -> ResourceRequest:
        """
        Dispatch a PATCH body to the matching transition.

        Coordinators approve, reject and hand out stock. The requester may
        only report a return; coordinators can record one on their behalf.
        """
        target = update_data.status
        request = await self.get_request(request_id)
        is_owner = str(request.user_id) == str(actor.id)

        if target == RequestStatus.RETURNED:
            if not (is_owner or actor.is_coordinator):
                raise AuthorizationError("Only the requester or a coordinator can return this request")
            return await self.confirm_return(request_id, actor.id, update_data.return_date)

        if target == RequestStatus.PENDING:
            raise InvalidTransitionError(str(request_id), request.status.value, "reopen")

        if not actor.is_coordinator:
            raise AuthorizationError("Only faculty or admins can change this request")

        if target == RequestStatus.APPROVED:
            return await self.approve(request_id, actor.id, update_data.notes)
        if target == RequestStatus.REJECTED:
            return await self.reject(request_id, actor.id, update_data.notes)
        return await self.collect(request_id, actor.id)

    async def _transition(self, request_id: str, action: str, actor_id: str, values: dict) -> ResourceRequest:
        from_status, to_status = TRANSITIONS[action]
        now = self.clock()

        try:
            result = await self.db.execute(
                update(ResourceRequest)
                .where(
                    ResourceRequest.id == str(request_id),
                    ResourceRequest.status == from_status,
                )
                .values(status=to_status, updated_at=now, **values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                current = await self._find(request_id)
                if current is None:
                    raise RequestNotFoundError(str(request_id))
                logger.warning(
                    f"Refused {action} on request {request_id}: status is {current.status.value}"
                )
                raise InvalidTransitionError(str(request_id), current.status.value, action)

            request = await self._find(request_id)
            if action in RELEASING_ACTIONS:
                await self.store.release(request.item_id, request.quantity)

            self.audit.record_transition(
                str(request_id),
                action,
                from_status.value,
                to_status.value,
                actor_id=actor_id,
                quantity=request.quantity,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_request(request_id)

    # ==================== READS ====================

    async def _find(self, request_id: str) -> Optional[ResourceRequest]:
        result = await self.db.execute(
            select(ResourceRequest)
            .where(ResourceRequest.id == str(request_id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_request(self, request_id: str) -> ResourceRequest:
        request = await self._find(request_id)
        if request is None:
            raise RequestNotFoundError(str(request_id))
        return request

    async def list_requests(
        self,
        user_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        kind: Optional[ItemKind] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[List[ResourceRequest], int]:
        """Newest first; returns the page and the unpaginated total"""
        query = select(ResourceRequest)
        if kind is not None:
            query = query.join(InventoryItem, ResourceRequest.item_id == InventoryItem.id).where(
                InventoryItem.kind == kind
            )
        if user_id is not None:
            query = query.where(ResourceRequest.user_id == str(user_id))
        if status is not None:
            query = query.where(ResourceRequest.status == status)

        total = (await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar_one()

        query = query.order_by(ResourceRequest.request_date.desc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all()), total

    async def list_overdue(
        self,
        now: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> List[ResourceRequest]:
        """Outstanding loans past their required date, most overdue first"""
        current = now or self.clock()
        query = select(ResourceRequest).where(
            ResourceRequest.status.in_(list(OUTSTANDING_STATUSES)),
            ResourceRequest.required_date < current,
        )
        if user_id is not None:
            query = query.where(ResourceRequest.user_id == str(user_id))
        result = await self.db.execute(
            query.order_by(ResourceRequest.required_date.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def history(self, request_id: str):
        await self.get_request(request_id)
        return await self.audit.history(REQUEST_TARGET, str(request_id))


def _validate_new_request(data: ResourceRequestCreate) -> None:
    if isinstance(data.quantity, bool) or data.quantity <= 0:
        raise ValidationError("Quantity must be greater than 0", field="quantity")
    if not data.purpose or not data.purpose.strip():
        raise ValidationError("Purpose is required", field="purpose")
    if data.required_date is None:
        raise ValidationError("Required date is required", field="required_date")
