from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime

from app.services.status_classifier import AvailabilityTier


class SpecificationRowSchema(BaseModel):
    attribute: str = ""
    value: str = ""


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: str = Field("General", min_length=1, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    total_quantity: int = Field(1, ge=0)
    specification: Optional[str] = None
    specification_rows: Optional[List[SpecificationRowSchema]] = None
    image_url: Optional[str] = Field(None, max_length=500)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    total_quantity: Optional[int] = Field(None, ge=0)
    specification: Optional[str] = None
    specification_rows: Optional[List[SpecificationRowSchema]] = None
    image_url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None

    @field_validator("name", "category", "total_quantity", "is_active")
    @classmethod
    def reject_null(cls, v):
        # omit the key to leave the column unchanged; these columns are NOT NULL
        if v is None:
            raise ValueError("may not be null")
        return v


class InventoryItemResponse(BaseModel):
    id: str
    kind: str
    name: str
    description: Optional[str] = None
    category: str
    location: Optional[str] = None
    specification: Optional[str] = None
    specification_rows: List[SpecificationRowSchema] = []
    image_url: Optional[str] = None
    total_quantity: int
    available_quantity: int
    availability: AvailabilityTier
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InventoryItemListResponse(BaseModel):
    items: List[InventoryItemResponse]
    total: int
