"""Initialization service for seeding the store with starter data."""

import logging
import typing as t
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.config import SETTINGS
from foodaid.core.feeds import FEEDS
from foodaid.core.models import (
    Collection,
    DistributionRequest,
    InventoryItem,
    RequestStatus,
    UserRole,
)
from foodaid.schemas.auth import Token
from foodaid.services.identity_service import IdentityService
from foodaid.services.inventory_service import InventoryService
from foodaid.utils.dates import utc_now

LOGGER: logging.Logger = logging.getLogger(__name__)

STARTER_INVENTORY: t.Tuple[t.Dict[str, t.Any], ...] = (
    {
        "item": "Canned Beans",
        "quantity": 450,
        "unit": "cases",
        "expiration": date(2026, 8, 1),
    },
    {
        "item": "Fresh Produce Mix",
        "quantity": 120,
        "unit": "crates",
        "expiration": date(2025, 10, 15),
    },
    {
        "item": "Dry Pasta",
        "quantity": 600,
        "unit": "boxes",
        "expiration": date(2027, 1, 20),
    },
    {
        "item": "Dairy (UHT Milk)",
        "quantity": 30,
        "unit": "gallons",
        "expiration": date(2025, 11, 5),
    },
)

STARTER_REQUESTS: t.Tuple[t.Dict[str, t.Any], ...] = (
    {
        "organization": "Community Shelter A",
        "item": "Canned Beans",
        "amount": 50,
        "status": RequestStatus.PENDING,
        "requested_date": date(2025, 10, 8),
    },
    {
        "organization": "Food Bank Central",
        "item": "Dry Pasta",
        "amount": 100,
        "status": RequestStatus.APPROVED,
        "requested_date": date(2025, 10, 7),
    },
)


async def seed_if_empty(db: AsyncSession, app_id: str) -> bool:
    """Insert starter inventory and requests into an empty inventory.

    Args:
        db (AsyncSession): The database session.
        app_id (str): The tenant to seed.

    Returns:
        bool: True if data was seeded, False if inventory already existed.
    """
    if not await InventoryService(db, app_id).is_empty():
        LOGGER.debug("Inventory already populated, skipping seed")
        return False

    now = utc_now()
    db.add_all(
        InventoryItem(app_id=app_id, last_updated=now, **data)
        for data in STARTER_INVENTORY
    )
    db.add_all(
        DistributionRequest(app_id=app_id, timestamp=now, **data)
        for data in STARTER_REQUESTS
    )
    await db.commit()

    FEEDS.notify(app_id, Collection.INVENTORY)
    FEEDS.notify(app_id, Collection.REQUESTS)
    LOGGER.info("Initial data seeded successfully.")
    return True


def issue_bootstrap_manager_token() -> Token:
    """Issue and log a manager token for the bootstrap manager identity.

    Returns:
        Token: The issued manager token.
    """
    token: Token = IdentityService.issue_token(
        SETTINGS.bootstrap_manager_id, UserRole.MANAGER
    )

    LOGGER.warning("=" * 60)
    LOGGER.warning("MANAGER TOKEN ISSUED")
    LOGGER.warning("=" * 60)
    LOGGER.warning("Manager ID: %s", SETTINGS.bootstrap_manager_id)
    LOGGER.warning("Token: %s", token.access_token)
    LOGGER.warning(
        "Valid for %d minutes", SETTINGS.access_token_expire_minutes
    )
    LOGGER.warning("=" * 60)

    return token


async def initialize_database(db: AsyncSession) -> None:
    """Initialize the store with default data.

    This function should be called at application startup.

    Args:
        db (AsyncSession): The database session.
    """
    LOGGER.info("Running store initialization...")

    if SETTINGS.seed_demo_data:
        await seed_if_empty(db, SETTINGS.app_id)

    issue_bootstrap_manager_token()

    await db.commit()
    LOGGER.info("Store initialization complete")
