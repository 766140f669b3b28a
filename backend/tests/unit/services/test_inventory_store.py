"""
Unit Tests for InventoryStore
Tests for: reserve, release, restock, counter bounds
"""
import random

import pytest

from app.core.exceptions import (
    InsufficientStockError,
    ItemNotFoundError,
    OverReleaseError,
    ValidationError,
)
from app.services.inventory_store import InventoryStore


@pytest.fixture
def store(db_session) -> InventoryStore:
    return InventoryStore(db_session)


class TestReserve:
    """Test taking stock off the shelf"""

    async def test_reserve_decrements_available(self, store, make_item):
        item_id = (await make_item(total=5)).id

        item = await store.reserve(item_id, 2)

        assert item.available_quantity == 3
        assert item.total_quantity == 5
        assert await store.held_quantity(item_id) == 2

    async def test_reserve_last_units(self, store, make_item):
        item_id = (await make_item(total=3)).id

        await store.reserve(item_id, 3)

        assert await store.available(item_id) == 0

    async def test_reserve_more_than_available_fails(self, store, make_item):
        item_id = (await make_item(total=5, available=1)).id

        with pytest.raises(InsufficientStockError) as exc_info:
            await store.reserve(item_id, 2)

        assert exc_info.value.details == {"item_id": item_id, "requested": 2, "available": 1}
        assert await store.available(item_id) == 1

    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_reserve_non_positive_quantity_fails(self, store, make_item, quantity):
        item_id = (await make_item(total=5)).id

        with pytest.raises(ValidationError):
            await store.reserve(item_id, quantity)

        assert await store.available(item_id) == 5

    async def test_reserve_unknown_item(self, store):
        with pytest.raises(ItemNotFoundError):
            await store.reserve("00000000-0000-0000-0000-000000000000", 1)


class TestRelease:
    """Test returning stock to the shelf"""

    async def test_release_increments_available(self, store, make_item):
        item_id = (await make_item(total=5, available=2)).id

        item = await store.release(item_id, 3)

        assert item.available_quantity == 5

    async def test_release_beyond_total_is_reported(self, store, make_item):
        """A double release is an error, never a silent clamp"""
        item_id = (await make_item(total=5, available=4)).id

        with pytest.raises(OverReleaseError) as exc_info:
            await store.release(item_id, 2)

        assert exc_info.value.status_code == 409
        assert await store.available(item_id) == 4

    async def test_release_unknown_item(self, store):
        with pytest.raises(ItemNotFoundError):
            await store.release("00000000-0000-0000-0000-000000000000", 1)


class TestRestock:
    """Test changing the owned quantity"""

    async def test_restock_up_shifts_available(self, store, make_item):
        item_id = (await make_item(total=5, available=3)).id

        item = await store.restock(item_id, 10)

        assert item.total_quantity == 10
        assert item.available_quantity == 8

    async def test_restock_down_keeps_loans(self, store, make_item):
        item_id = (await make_item(total=10, available=7)).id

        item = await store.restock(item_id, 4)

        assert item.total_quantity == 4
        assert item.available_quantity == 1
        assert item.held_quantity == 3

    async def test_restock_below_held_fails(self, store, make_item):
        item_id = (await make_item(total=10, available=4)).id

        with pytest.raises(ValidationError):
            await store.restock(item_id, 5)

        item = await store.get(item_id)
        assert (item.available_quantity, item.total_quantity) == (4, 10)

    async def test_restock_negative_fails(self, store, make_item):
        item_id = (await make_item(total=1)).id

        with pytest.raises(ValidationError):
            await store.restock(item_id, -1)


class TestCounterBounds:
    """0 <= available <= total after any sequence of operations"""

    async def test_random_reserve_release_sequence(self, store, make_item):
        item_id = (await make_item(total=6)).id
        rng = random.Random(1234)

        for _ in range(60):
            quantity = rng.randint(1, 4)
            try:
                if rng.random() < 0.5:
                    await store.reserve(item_id, quantity)
                else:
                    await store.release(item_id, quantity)
            except (InsufficientStockError, OverReleaseError):
                pass

            item = await store.get(item_id)
            assert 0 <= item.available_quantity <= item.total_quantity == 6
