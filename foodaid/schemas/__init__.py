"""Schemas package."""

from foodaid.schemas.auth import Session, SignInResult, Token, TokenSignIn
from foodaid.schemas.inventory import (
    InventoryItemListResponse,
    InventoryItemResponse,
)
from foodaid.schemas.record import (
    BenefitSummary,
    RecordListResponse,
    RecordResponse,
)
from foodaid.schemas.request import (
    RequestCreate,
    RequestListResponse,
    RequestResponse,
    RequestStatusUpdate,
)
from foodaid.schemas.statistics import DashboardStats

__all__ = [
    "BenefitSummary",
    "DashboardStats",
    "InventoryItemListResponse",
    "InventoryItemResponse",
    "RecordListResponse",
    "RecordResponse",
    "RequestCreate",
    "RequestListResponse",
    "RequestResponse",
    "RequestStatusUpdate",
    "Session",
    "SignInResult",
    "Token",
    "TokenSignIn",
]
