"""Routers package."""

from foodaid.routers.api import ROUTER as api_router
from foodaid.routers.web import ROUTER as web_router

__all__ = ["api_router", "web_router"]
