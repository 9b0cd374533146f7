"""Inventory endpoints (manager only)."""

import typing as t

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.auth import require_manager
from foodaid.core.config import SETTINGS
from foodaid.core.database import get_db
from foodaid.schemas.auth import Session
from foodaid.schemas.inventory import (
    InventoryItemListResponse,
    InventoryItemResponse,
)
from foodaid.schemas.statistics import DashboardStats
from foodaid.services import InventoryItemNotFoundError, InventoryService
from foodaid.services.init_service import seed_if_empty

ROUTER = APIRouter(prefix="/inventory", tags=["Inventory"])


@ROUTER.get("", response_model=InventoryItemListResponse)
async def list_inventory(
    db: t.Annotated[AsyncSession, Depends(get_db)],
    _: t.Annotated[Session, Depends(require_manager)],
) -> InventoryItemListResponse:
    """List the inventory, most recently updated first.

    Args:
        db (AsyncSession): The database session.
        _ (Session): The manager session.

    Returns:
        InventoryItemListResponse: The inventory items.
    """
    return await InventoryService(db, SETTINGS.app_id).list_items()


@ROUTER.get("/stats", response_model=DashboardStats)
async def get_statistics(
    db: t.Annotated[AsyncSession, Depends(get_db)],
    _: t.Annotated[Session, Depends(require_manager)],
) -> DashboardStats:
    """Get the dashboard statistics.

    Args:
        db (AsyncSession): The database session.
        _ (Session): The manager session.

    Returns:
        DashboardStats: Total units, pending requests and low-stock count.
    """
    return await InventoryService(db, SETTINGS.app_id).get_statistics()


@ROUTER.post("/seed")
async def seed_inventory(
    db: t.Annotated[AsyncSession, Depends(get_db)],
    _: t.Annotated[Session, Depends(require_manager)],
) -> t.Dict[str, bool]:
    """Seed starter inventory and requests if the inventory is empty.

    Args:
        db (AsyncSession): The database session.
        _ (Session): The manager session.

    Returns:
        t.Dict[str, bool]: Whether data was seeded.
    """
    return {"seeded": await seed_if_empty(db, SETTINGS.app_id)}


@ROUTER.post("/{item_id}/restock", response_model=InventoryItemResponse)
async def restock_item(
    item_id: str,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    _: t.Annotated[Session, Depends(require_manager)],
) -> InventoryItemResponse:
    """Add the fixed restock increment to an item.

    Args:
        item_id (str): The ID of the inventory item.
        db (AsyncSession): The database session.
        _ (Session): The manager session.

    Returns:
        InventoryItemResponse: The updated item.
    """
    try:
        return await InventoryService(db, SETTINGS.app_id).restock(item_id)
    except InventoryItemNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
