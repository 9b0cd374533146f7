"""Inventory service - business logic for warehouse stock."""

import logging
import typing as t

from sqlalchemy import func, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.config import SETTINGS
from foodaid.core.feeds import FEEDS
from foodaid.core.models import (
    Collection,
    DistributionRequest,
    InventoryItem,
    RequestStatus,
)
from foodaid.schemas.inventory import (
    InventoryItemListResponse,
    InventoryItemResponse,
)
from foodaid.schemas.statistics import DashboardStats
from foodaid.utils.dates import as_utc, utc_now

LOGGER: logging.Logger = logging.getLogger(__name__)


class InventoryItemNotFoundError(Exception):
    """Raised when an inventory item is not found."""

    identifier: str

    def __init__(self, identifier: str) -> None:
        """Initialize InventoryItemNotFoundError.

        Args:
            identifier (str): The ID or name that was looked up.
        """
        self.identifier = identifier
        super().__init__(f"Inventory item {identifier!r} not found")


class InventoryService:
    """Service class for inventory operations."""

    db: AsyncSession
    app_id: str

    def __init__(self, db: AsyncSession, app_id: str) -> None:
        """Initialize InventoryService.

        Args:
            db (AsyncSession): The database session.
            app_id (str): The tenant whose collection is used.
        """
        self.db = db
        self.app_id = app_id

    @staticmethod
    def convert_item_to_response(
        item: InventoryItem,
    ) -> InventoryItemResponse:
        """Convert InventoryItem model to InventoryItemResponse schema.

        Args:
            item (InventoryItem): The inventory item model.

        Returns:
            InventoryItemResponse: The inventory item response schema.
        """
        return InventoryItemResponse(
            id=item.id,
            item=item.item,
            quantity=item.quantity,
            unit=item.unit,
            expiration=item.expiration,
            last_updated=as_utc(item.last_updated),
            is_low_stock=item.is_low_stock(SETTINGS.low_stock_threshold),
            is_near_expiry=item.is_near_expiry(SETTINGS.near_expiry_days),
        )

    async def list_item_models(self) -> t.Sequence[InventoryItem]:
        """List inventory documents, most recently updated first.

        Returns:
            t.Sequence[InventoryItem]: The inventory item models.
        """
        return (
            (
                await self.db.execute(
                    select(InventoryItem)
                    .where(InventoryItem.app_id == self.app_id)
                    .order_by(InventoryItem.last_updated.desc())
                )
            )
            .scalars()
            .all()
        )

    async def list_items(self) -> InventoryItemListResponse:
        """List the inventory collection.

        Returns:
            InventoryItemListResponse: The inventory snapshot.
        """
        items: t.List[InventoryItemResponse] = [
            self.convert_item_to_response(item)
            for item in await self.list_item_models()
        ]
        return InventoryItemListResponse(items=items, total=len(items))

    async def get_item_model(self, item_id: str) -> InventoryItem:
        """Get the raw InventoryItem model by ID.

        Args:
            item_id (str): The ID of the inventory item.

        Returns:
            InventoryItem: The inventory item model.
        """
        item: InventoryItem | None = (
            await self.db.execute(
                select(InventoryItem).where(
                    InventoryItem.app_id == self.app_id,
                    InventoryItem.id == item_id,
                )
            )
        ).scalar_one_or_none()

        if item is None:
            raise InventoryItemNotFoundError(item_id)

        return item

    async def find_by_name(self, name: str) -> InventoryItem | None:
        """Find an inventory item by its name.

        Args:
            name (str): The item name.

        Returns:
            InventoryItem | None: The item if it exists.
        """
        return (
            await self.db.execute(
                select(InventoryItem).where(
                    InventoryItem.app_id == self.app_id,
                    InventoryItem.item == name,
                )
            )
        ).scalar_one_or_none()

    async def stock_by_name(self) -> t.Dict[str, int]:
        """Map every item name to its current quantity.

        Returns:
            t.Dict[str, int]: Quantities keyed by item name.
        """
        rows = (
            await self.db.execute(
                select(InventoryItem.item, InventoryItem.quantity).where(
                    InventoryItem.app_id == self.app_id
                )
            )
        ).all()
        return {name: quantity for name, quantity in rows}

    async def item_names(self) -> t.List[str]:
        """List item names in alphabetical order.

        Returns:
            t.List[str]: The item names.
        """
        return sorted(await self.stock_by_name())

    async def is_empty(self) -> bool:
        """Check whether the inventory collection has no documents.

        Returns:
            bool: True if the collection is empty.
        """
        count: int = (
            await self.db.execute(
                select(func.count())  # pylint: disable=not-callable
                .select_from(InventoryItem)
                .where(InventoryItem.app_id == self.app_id)
            )
        ).scalar() or 0
        return count == 0

    async def restock(self, item_id: str) -> InventoryItemResponse:
        """Add the fixed restock increment to an item.

        Args:
            item_id (str): The ID of the inventory item.

        Returns:
            InventoryItemResponse: The updated inventory item.
        """
        item: InventoryItem = await self.get_item_model(item_id)

        result: CursorResult[t.Any] = t.cast(
            CursorResult[t.Any],
            await self.db.execute(
                update(InventoryItem)
                .where(
                    InventoryItem.app_id == self.app_id,
                    InventoryItem.id == item_id,
                )
                .values(
                    quantity=InventoryItem.quantity
                    + SETTINGS.restock_increment,
                    last_updated=utc_now(),
                )
                .execution_options(synchronize_session=False)
            ),
        )
        if result.rowcount != 1:
            await self.db.rollback()
            raise InventoryItemNotFoundError(item_id)

        await self.db.commit()
        await self.db.refresh(item)
        FEEDS.notify(self.app_id, Collection.INVENTORY)

        LOGGER.info(
            "Stock updated for %s. New quantity: %d", item.item, item.quantity
        )
        return self.convert_item_to_response(item)

    async def get_low_stock_and_expiring(
        self,
    ) -> t.Tuple[t.List[InventoryItem], t.List[InventoryItem]]:
        """Split out items that are low on stock or close to expiry.

        Returns:
            t.Tuple[t.List[InventoryItem], t.List[InventoryItem]]:
                The low-stock items and the near-expiry items.
        """
        items: t.Sequence[InventoryItem] = await self.list_item_models()
        low_stock: t.List[InventoryItem] = [
            item
            for item in items
            if item.is_low_stock(SETTINGS.low_stock_threshold)
        ]
        near_expiry: t.List[InventoryItem] = [
            item
            for item in items
            if item.is_near_expiry(SETTINGS.near_expiry_days)
        ]
        return low_stock, near_expiry

    async def get_statistics(self) -> DashboardStats:
        """Get the manager dashboard statistics.

        Returns:
            DashboardStats: The dashboard statistics.
        """
        items: t.Sequence[InventoryItem] = await self.list_item_models()
        pending: int = (
            await self.db.execute(
                select(func.count())  # pylint: disable=not-callable
                .select_from(DistributionRequest)
                .where(
                    DistributionRequest.app_id == self.app_id,
                    DistributionRequest.status == RequestStatus.PENDING,
                )
            )
        ).scalar() or 0

        return DashboardStats(
            total_inventory_units=sum(item.quantity for item in items),
            pending_requests=pending,
            low_stock_items=sum(
                1
                for item in items
                if item.is_low_stock(SETTINGS.low_stock_threshold)
            ),
        )
