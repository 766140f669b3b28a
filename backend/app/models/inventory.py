"""
Inventory Models - Lab components and library items share one table

total_quantity is what the department owns; available_quantity is what is on
the shelf. The gap is stock reserved by open resource requests.
"""

from sqlalchemy import Column, String, Boolean, DateTime, Text, Integer, Enum as SQLEnum, CheckConstraint, Index
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class ItemKind(str, enum.Enum):
    """Catalogue an item belongs to"""
    LAB_COMPONENT = "lab_component"
    LIBRARY_ITEM = "library_item"


class InventoryItem(Base):
    """Lab component or library item with stock counters"""
    __tablename__ = "inventory_items"

    __table_args__ = (
        CheckConstraint("total_quantity >= 0", name="ck_inventory_items_total_non_negative"),
        CheckConstraint("available_quantity >= 0", name="ck_inventory_items_available_non_negative"),
        CheckConstraint("available_quantity <= total_quantity", name="ck_inventory_items_available_le_total"),
        Index('ix_inventory_items_kind_category', 'kind', 'category'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    kind = Column(SQLEnum(ItemKind), nullable=False, default=ItemKind.LAB_COMPONENT)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False, default="General")
    location = Column(String(255), nullable=True)
    specification = Column(Text, nullable=True)  # "Attribute: Value. Attribute: Value"
    image_url = Column(String(500), nullable=True)

    # Stock
    total_quantity = Column(Integer, nullable=False, default=0)
    available_quantity = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(GUID, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    requests = relationship("ResourceRequest", back_populates="item")

    @property
    def held_quantity(self) -> int:
        return (self.total_quantity or 0) - (self.available_quantity or 0)

    def __repr__(self):
        return f"<InventoryItem {self.name} {self.available_quantity}/{self.total_quantity}>"
