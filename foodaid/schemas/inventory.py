"""Pydantic schemas for inventory documents."""

import typing as t
from datetime import date, datetime

from pydantic import Field

from foodaid.schemas.base import DocumentSchema


class InventoryItemBase(DocumentSchema):
    """Base inventory item schema."""

    item: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=50)
    expiration: date


class InventoryItemResponse(InventoryItemBase):
    """Schema for inventory item response."""

    id: str
    last_updated: datetime
    is_low_stock: bool
    is_near_expiry: bool


class InventoryItemListResponse(DocumentSchema):
    """Schema for inventory list response, newest update first."""

    items: t.List[InventoryItemResponse]
    total: int
