from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.core.types import to_naive_utc
from app.models.resource_request import RequestStatus


class ResourceRequestCreate(BaseModel):
    """
    Body of POST /component-requests.

    Field presence and types are checked here; the business rules (positive
    quantity, non-empty purpose, required date, stock, project approval) are
    enforced by the lifecycle service so they hold for every caller.
    """
    component_id: str
    project_id: str
    quantity: int
    purpose: str = ""
    required_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("required_date")
    @classmethod
    def normalise_required_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else v


class ResourceRequestStatusUpdate(BaseModel):
    """Body of PATCH /component-requests/{id}"""
    status: RequestStatus
    return_date: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("return_date")
    @classmethod
    def normalise_return_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else v


class RequestItemSummary(BaseModel):
    id: str
    name: str
    kind: str
    category: str
    location: Optional[str] = None
    available_quantity: int
    total_quantity: int


class RequestProjectSummary(BaseModel):
    id: str
    name: str
    status: str


class ResourceRequestResponse(BaseModel):
    id: str
    component_id: str
    user_id: str
    project_id: str
    quantity: int
    purpose: str
    request_date: datetime
    required_date: datetime
    status: RequestStatus
    approved_date: Optional[datetime] = None
    approved_by: Optional[str] = None
    return_date: Optional[datetime] = None
    return_verified: bool = False
    return_verified_at: Optional[datetime] = None
    notes: Optional[str] = None
    is_overdue: bool = False
    overdue_days: int = 0
    component: Optional[RequestItemSummary] = None
    project: Optional[RequestProjectSummary] = None

    model_config = ConfigDict(from_attributes=True)


class ResourceRequestListResponse(BaseModel):
    requests: List[ResourceRequestResponse]
    total: int


class AuditEntryResponse(BaseModel):
    id: str
    action: str
    actor_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
