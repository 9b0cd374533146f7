"""API routes package."""

from fastapi import APIRouter

from foodaid.routers.api import auth, feeds, inventory, records, requests

# Create main API router with /api prefix
ROUTER = APIRouter(prefix="/api")

# Include all sub-routers
ROUTER.include_router(auth.ROUTER)
ROUTER.include_router(inventory.ROUTER)
ROUTER.include_router(requests.ROUTER)
ROUTER.include_router(records.ROUTER)
ROUTER.include_router(feeds.ROUTER)

__all__ = [
    "auth",
    "feeds",
    "inventory",
    "records",
    "requests",
    "ROUTER",
]
