"""Pydantic schemas for distribution request documents."""

import typing as t
from datetime import date, datetime

from pydantic import EmailStr, Field

from foodaid.core.models import RequestStatus
from foodaid.schemas.base import DocumentSchema


class RequestBase(DocumentSchema):
    """Base distribution request schema."""

    organization: str = Field(..., min_length=1, max_length=200)
    item: str = Field(..., min_length=1, max_length=255)
    amount: int = Field(..., ge=1)


class RequestCreate(RequestBase):
    """Schema for the public submission form."""

    contact_email: EmailStr


class RequestStatusUpdate(DocumentSchema):
    """Schema for a manager status change."""

    status: RequestStatus


class RequestResponse(RequestBase):
    """Schema for distribution request response."""

    id: str
    status: RequestStatus
    contact_email: str | None = None
    requested_date: date
    timestamp: datetime
    processed_by: datetime | None = None
    available: int = Field(
        0, description="Current stock of the referenced inventory item"
    )
    is_shippable: bool = False


class RequestListResponse(DocumentSchema):
    """Schema for request list response, newest first."""

    requests: t.List[RequestResponse]
    total: int
