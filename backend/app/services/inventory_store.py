"""
Inventory Store - authoritative stock counters per item

reserve/release/restock are each a single conditional UPDATE, so two handlers
racing for the last unit cannot both succeed and available_quantity can never
leave [0, total_quantity]. The store never commits: callers own the
transaction so a reservation and the request that needs it land together.
"""

from typing import Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    InsufficientStockError,
    ItemNotFoundError,
    OverReleaseError,
    ValidationError,
)
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.inventory import InventoryItem


class InventoryStore:
    """Stock accounting for lab components and library items"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, item_id: str) -> Optional[InventoryItem]:
        """Fresh read of an item, bypassing stale identity-map state"""
        result = await self.db.execute(
            select(InventoryItem)
            .where(InventoryItem.id == str(item_id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get(self, item_id: str) -> InventoryItem:
        item = await self.find(item_id)
        if not item:
            raise ItemNotFoundError(str(item_id))
        return item

    async def available(self, item_id: str) -> int:
        return (await self.get(item_id)).available_quantity

    async def held_quantity(self, item_id: str) -> int:
        return (await self.get(item_id)).held_quantity

    async def reserve(self, item_id: str, quantity: int) -> InventoryItem:
        """
        Take `quantity` units off the shelf.

        Raises:
            ValidationError: quantity is not positive
            ItemNotFoundError: no such item
            InsufficientStockError: fewer than `quantity` units available
        """
        _require_positive(quantity)

        result = await self.db.execute(
            update(InventoryItem)
            .where(
                InventoryItem.id == str(item_id),
                InventoryItem.available_quantity >= quantity,
            )
            .values(
                available_quantity=InventoryItem.available_quantity - quantity,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            item = await self.get(item_id)
            raise InsufficientStockError(str(item_id), quantity, item.available_quantity)

        logger.log_stock_change(str(item_id), "reserve", quantity)
        return await self.get(item_id)

    async def release(self, item_id: str, quantity: int) -> InventoryItem:
        """
        Put `quantity` units back on the shelf.

        Raises:
            ValidationError: quantity is not positive
            ItemNotFoundError: no such item
            OverReleaseError: available would exceed total (double release)
        """
        _require_positive(quantity)

        result = await self.db.execute(
            update(InventoryItem)
            .where(
                InventoryItem.id == str(item_id),
                InventoryItem.available_quantity + quantity <= InventoryItem.total_quantity,
            )
            .values(
                available_quantity=InventoryItem.available_quantity + quantity,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            item = await self.get(item_id)
            logger.error(
                f"Over-release on item {item_id}: +{quantity} with "
                f"{item.available_quantity}/{item.total_quantity} available"
            )
            raise OverReleaseError(str(item_id), quantity, item.available_quantity, item.total_quantity)

        logger.log_stock_change(str(item_id), "release", quantity)
        return await self.get(item_id)

    async def restock(self, item_id: str, new_total: int) -> InventoryItem:
        """
        Change the owned quantity, shifting available by the same delta.

        The units currently out on loan stay out, so new_total may not drop
        below the held quantity.
        """
        if new_total is None or new_total < 0:
            raise ValidationError("Total quantity cannot be negative", field="total_quantity")

        held = InventoryItem.total_quantity - InventoryItem.available_quantity
        result = await self.db.execute(
            update(InventoryItem)
            .where(
                InventoryItem.id == str(item_id),
                held <= new_total,
            )
            .values(
                available_quantity=InventoryItem.available_quantity + (new_total - InventoryItem.total_quantity),
                total_quantity=new_total,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            item = await self.get(item_id)
            raise ValidationError(
                f"Total quantity {new_total} is below the {item.held_quantity} units currently on loan",
                field="total_quantity",
            )

        logger.log_stock_change(str(item_id), "restock", new_total)
        return await self.get(item_id)


def _require_positive(quantity: int) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValidationError("Quantity must be a positive integer", field="quantity")
