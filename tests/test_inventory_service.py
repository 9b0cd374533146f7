"""Tests for inventory reads, restocking and seeding."""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.models import InventoryItem, RequestStatus
from foodaid.services.init_service import STARTER_INVENTORY, seed_if_empty
from foodaid.services.inventory_service import (
    InventoryItemNotFoundError,
    InventoryService,
)
from foodaid.services.request_service import RequestService
from foodaid.utils.dates import utc_today
from tests.conftest import APP_ID, add_inventory, add_request, read_inventory


async def test_restock_adds_ten_units(db: AsyncSession) -> None:
    item_id = await add_inventory("Canned Beans", 450)

    response = await InventoryService(db, APP_ID).restock(item_id)

    assert response.quantity == 460
    assert (await read_inventory(item_id)).quantity == 460


async def test_restock_twice(db: AsyncSession) -> None:
    item_id = await add_inventory("Dairy (UHT Milk)", 30)
    service = InventoryService(db, APP_ID)

    await service.restock(item_id)
    response = await service.restock(item_id)

    assert response.quantity == 50
    assert response.is_low_stock is False


async def test_restock_unknown_item(db: AsyncSession) -> None:
    with pytest.raises(InventoryItemNotFoundError):
        await InventoryService(db, APP_ID).restock("missing")


async def test_restock_is_scoped_to_app_id(db: AsyncSession) -> None:
    item_id = await add_inventory("Canned Beans", 450)

    with pytest.raises(InventoryItemNotFoundError):
        await InventoryService(db, "other-app").restock(item_id)

    assert (await read_inventory(item_id)).quantity == 450


async def test_list_items_flags(db: AsyncSession) -> None:
    await add_inventory("Dairy (UHT Milk)", 30)
    await add_inventory(
        "Fresh Produce Mix", 120, expiration=utc_today() + timedelta(days=5)
    )
    await add_inventory(
        "Dry Pasta", 600, expiration=utc_today() + timedelta(days=365)
    )

    listed = await InventoryService(db, APP_ID).list_items()
    by_name = {item.item: item for item in listed.items}

    assert listed.total == 3
    assert by_name["Dairy (UHT Milk)"].is_low_stock is True
    assert by_name["Fresh Produce Mix"].is_low_stock is False
    assert by_name["Fresh Produce Mix"].is_near_expiry is True
    assert by_name["Dry Pasta"].is_near_expiry is False


def test_low_stock_boundary() -> None:
    assert InventoryItem(quantity=49).is_low_stock(50) is True
    assert InventoryItem(quantity=50).is_low_stock(50) is False


async def test_statistics(db: AsyncSession) -> None:
    await add_inventory("Canned Beans", 450)
    await add_inventory("Dairy (UHT Milk)", 30)
    await add_request("Canned Beans", 50)
    await add_request("Canned Beans", 20)
    await add_request("Dry Pasta", 100, status=RequestStatus.APPROVED)

    stats = await InventoryService(db, APP_ID).get_statistics()

    assert stats.total_inventory_units == 480
    assert stats.pending_requests == 2
    assert stats.low_stock_items == 1


async def test_statistics_on_empty_store(db: AsyncSession) -> None:
    stats = await InventoryService(db, APP_ID).get_statistics()

    assert stats.total_inventory_units == 0
    assert stats.pending_requests == 0
    assert stats.low_stock_items == 0


async def test_low_stock_and_expiring(db: AsyncSession) -> None:
    await add_inventory("Dairy (UHT Milk)", 30)
    await add_inventory(
        "Fresh Produce Mix", 120, expiration=utc_today() - timedelta(days=1)
    )

    low_stock, near_expiry = await InventoryService(
        db, APP_ID
    ).get_low_stock_and_expiring()

    assert [item.item for item in low_stock] == ["Dairy (UHT Milk)"]
    assert [item.item for item in near_expiry] == ["Fresh Produce Mix"]


async def test_seed_if_empty_seeds_once(db: AsyncSession) -> None:
    assert await seed_if_empty(db, APP_ID) is True
    assert await seed_if_empty(db, APP_ID) is False

    inventory = await InventoryService(db, APP_ID).list_items()
    requests = await RequestService(db, APP_ID).list_requests()

    assert inventory.total == len(STARTER_INVENTORY)
    assert {item.item: item.quantity for item in inventory.items} == {
        "Canned Beans": 450,
        "Fresh Produce Mix": 120,
        "Dry Pasta": 600,
        "Dairy (UHT Milk)": 30,
    }
    assert requests.total == 2


async def test_seed_skips_populated_inventory(db: AsyncSession) -> None:
    await add_inventory("Rice", 10)

    assert await seed_if_empty(db, APP_ID) is False
    assert (await InventoryService(db, APP_ID).list_items()).total == 1


async def test_item_names_sorted(db: AsyncSession) -> None:
    await add_inventory("Rice", 10)
    await add_inventory("Canned Beans", 10)

    assert await InventoryService(db, APP_ID).item_names() == [
        "Canned Beans",
        "Rice",
    ]
