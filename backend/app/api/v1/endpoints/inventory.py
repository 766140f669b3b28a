"""
Catalogue API - lab components and library items

Both catalogues share the inventory_items table and the same handlers; each
router is bound to one ItemKind and never sees items of the other kind.
Stock counters are only moved through InventoryStore.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import ItemNotFoundError
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.inventory import InventoryItem, ItemKind
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemListResponse,
    InventoryItemResponse,
    InventoryItemUpdate,
    SpecificationRowSchema,
)
from app.services.audit_trail import ITEM_TARGET, AuditTrail
from app.services.inventory_store import InventoryStore
from app.services.specifications import (
    SpecificationRow,
    format_location,
    format_specifications,
    parse_specifications,
    to_title_case,
)
from app.services.status_classifier import availability_tier


def build_item_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        id=str(item.id),
        kind=item.kind.value,
        name=item.name,
        description=item.description,
        category=item.category,
        location=item.location,
        specification=item.specification,
        specification_rows=[
            SpecificationRowSchema(attribute=row.attribute, value=row.value)
            for row in parse_specifications(item.specification)
        ],
        image_url=item.image_url,
        total_quantity=item.total_quantity,
        available_quantity=item.available_quantity,
        availability=availability_tier(item.available_quantity, item.total_quantity),
        is_active=item.is_active,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _specification_text(text: Optional[str], rows) -> Optional[str]:
    """Structured rows win over free text when both are sent"""
    if rows is not None:
        return format_specifications(SpecificationRow(r.attribute, r.value) for r in rows) or None
    return text


def build_inventory_router(kind: ItemKind, prefix: str, tag: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])

    async def get_item_of_kind(db: AsyncSession, item_id: str) -> InventoryItem:
        item = await InventoryStore(db).find(item_id)
        if item is None or item.kind != kind:
            raise ItemNotFoundError(item_id)
        return item

    @router.get("", response_model=InventoryItemListResponse)
    async def list_items(
        category: Optional[str] = None,
        search: Optional[str] = Query(None, max_length=100),
        include_inactive: bool = False,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ):
        query = select(InventoryItem).where(InventoryItem.kind == kind)
        if not (include_inactive and current_user.is_coordinator):
            query = query.where(InventoryItem.is_active == True)  # noqa: E712
        if category:
            query = query.where(func.lower(InventoryItem.category) == category.lower())
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(
                InventoryItem.name.ilike(pattern),
                InventoryItem.description.ilike(pattern),
                InventoryItem.specification.ilike(pattern),
            ))

        result = await db.execute(query.order_by(InventoryItem.name.asc()))
        items = result.scalars().all()
        return InventoryItemListResponse(
            items=[build_item_response(i) for i in items],
            total=len(items),
        )

    @router.post("", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
    async def create_item(
        data: InventoryItemCreate,
        current_user: User = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db)
    ):
        item = InventoryItem(
            kind=kind,
            name=data.name.strip(),
            description=data.description,
            category=to_title_case(data.category.strip()),
            location=format_location(data.location) if data.location else None,
            specification=_specification_text(data.specification, data.specification_rows),
            image_url=data.image_url,
            total_quantity=data.total_quantity,
            available_quantity=data.total_quantity,
            created_by=str(current_user.id),
        )
        db.add(item)
        await db.flush()

        AuditTrail(db).record(
            "item_created", ITEM_TARGET, item.id, actor_id=current_user.id,
            details={"kind": kind.value, "total_quantity": data.total_quantity},
        )
        await db.commit()

        logger.info(f"Created {kind.value} {item.name} ({item.total_quantity} units)")
        return build_item_response(await get_item_of_kind(db, item.id))

    @router.get("/{item_id}", response_model=InventoryItemResponse)
    async def get_item(
        item_id: str,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ):
        return build_item_response(await get_item_of_kind(db, item_id))

    @router.patch("/{item_id}", response_model=InventoryItemResponse)
    async def update_item(
        item_id: str,
        data: InventoryItemUpdate,
        current_user: User = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db)
    ):
        """Edit catalogue fields; a new total_quantity restocks atomically"""
        item = await get_item_of_kind(db, item_id)
        changes = data.model_dump(exclude_unset=True)
        new_total = changes.pop("total_quantity", None)
        rows = changes.pop("specification_rows", None)

        try:
            if "name" in changes:
                item.name = changes["name"].strip()
            if "description" in changes:
                item.description = changes["description"]
            if "category" in changes:
                item.category = to_title_case(changes["category"].strip())
            if "location" in changes:
                item.location = format_location(changes["location"]) if changes["location"] else None
            if "specification" in changes or rows is not None:
                item.specification = _specification_text(changes.get("specification"), data.specification_rows)
            if "image_url" in changes:
                item.image_url = changes["image_url"]
            if changes.get("is_active") is not None:
                item.is_active = changes["is_active"]
            item.updated_at = utcnow()
            await db.flush()

            if new_total is not None and new_total != item.total_quantity:
                await InventoryStore(db).restock(item.id, new_total)

            AuditTrail(db).record(
                "item_updated", ITEM_TARGET, item.id, actor_id=current_user.id,
                details={"fields": sorted(data.model_dump(exclude_unset=True).keys())},
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        return build_item_response(await get_item_of_kind(db, item_id))

    @router.delete("/{item_id}", response_model=InventoryItemResponse)
    async def deactivate_item(
        item_id: str,
        current_user: User = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db)
    ):
        """Hide the item from the catalogue; request history keeps pointing at it"""
        item = await get_item_of_kind(db, item_id)
        item.is_active = False
        item.updated_at = utcnow()
        AuditTrail(db).record("item_deactivated", ITEM_TARGET, item.id, actor_id=current_user.id)
        await db.commit()

        logger.info(f"Deactivated {kind.value} {item_id}")
        return build_item_response(await get_item_of_kind(db, item_id))

    return router


lab_components_router = build_inventory_router(ItemKind.LAB_COMPONENT, "/lab-components", "Lab Components")
library_items_router = build_inventory_router(ItemKind.LIBRARY_ITEM, "/library-items", "Library Items")
