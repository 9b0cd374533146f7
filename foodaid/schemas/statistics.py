"""Pydantic schemas for request/response validation."""

from foodaid.schemas.base import DocumentSchema


class DashboardStats(DocumentSchema):
    """Schema for manager dashboard statistics."""

    total_inventory_units: int
    pending_requests: int
    low_stock_items: int
