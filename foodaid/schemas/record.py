"""Pydantic schemas for distribution record documents."""

import typing as t
from datetime import datetime

from pydantic import Field

from foodaid.core.models import RecordStatus
from foodaid.schemas.base import DocumentSchema


class RecordResponse(DocumentSchema):
    """Schema for distribution record response."""

    id: str
    recipient_id: str
    food_item: str
    quantity: int = Field(..., ge=1)
    location: str
    status: RecordStatus
    timestamp: datetime


class RecordListResponse(DocumentSchema):
    """Schema for record list response, newest first."""

    records: t.List[RecordResponse]
    total: int


class BenefitSummary(DocumentSchema):
    """Citizen benefit card built from the visible records."""

    pending_count: int
    completed_count: int
    next_pickup_location: str
