"""Services package."""

from foodaid.services.feed_service import FeedForbiddenError, FeedService
from foodaid.services.identity_service import (
    AuthenticationError,
    IdentityService,
)
from foodaid.services.inventory_service import (
    InventoryItemNotFoundError,
    InventoryService,
)
from foodaid.services.record_service import (
    RecordNotFoundError,
    RecordService,
)
from foodaid.services.request_service import (
    InsufficientStockError,
    InvalidStatusTransitionError,
    RequestNotFoundError,
    RequestService,
)

__all__ = [
    "AuthenticationError",
    "FeedForbiddenError",
    "FeedService",
    "IdentityService",
    "InsufficientStockError",
    "InvalidStatusTransitionError",
    "InventoryItemNotFoundError",
    "InventoryService",
    "RecordNotFoundError",
    "RecordService",
    "RequestNotFoundError",
    "RequestService",
]
