"""Distribution request endpoints."""

import typing as t

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.auth import require_manager
from foodaid.core.config import SETTINGS
from foodaid.core.database import get_db
from foodaid.schemas.auth import Session
from foodaid.schemas.request import (
    RequestCreate,
    RequestListResponse,
    RequestResponse,
    RequestStatusUpdate,
)
from foodaid.services import (
    InsufficientStockError,
    InvalidStatusTransitionError,
    InventoryItemNotFoundError,
    RequestNotFoundError,
    RequestService,
)

ROUTER = APIRouter(prefix="/requests", tags=["Requests"])


@ROUTER.get("", response_model=RequestListResponse)
async def list_requests(
    db: t.Annotated[AsyncSession, Depends(get_db)],
    _: t.Annotated[Session, Depends(require_manager)],
) -> RequestListResponse:
    """List all requests, newest first.

    Args:
        db (AsyncSession): The database session.
        _ (Session): The manager session.

    Returns:
        RequestListResponse: The requests.
    """
    return await RequestService(db, SETTINGS.app_id).list_requests()


@ROUTER.post(
    "", response_model=RequestResponse, status_code=status.HTTP_201_CREATED
)
async def submit_request(
    request_data: RequestCreate,
    db: t.Annotated[AsyncSession, Depends(get_db)],
) -> RequestResponse:
    """Submit a new request through the public form.

    Args:
        request_data (RequestCreate): The request data.
        db (AsyncSession): The database session.

    Returns:
        RequestResponse: The created request.
    """
    return await RequestService(db, SETTINGS.app_id).submit(
        organization=request_data.organization,
        item=request_data.item,
        amount=request_data.amount,
        contact_email=request_data.contact_email,
    )


@ROUTER.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: str,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    _: t.Annotated[Session, Depends(require_manager)],
) -> RequestResponse:
    """Get a request by ID.

    Args:
        request_id (str): The ID of the request.
        db (AsyncSession): The database session.
        _ (Session): The manager session.

    Returns:
        RequestResponse: The request.
    """
    try:
        return await RequestService(db, SETTINGS.app_id).get_request(
            request_id
        )
    except RequestNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc


@ROUTER.put("/{request_id}/status", response_model=RequestResponse)
async def update_request_status(
    request_id: str,
    update: RequestStatusUpdate,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    _: t.Annotated[Session, Depends(require_manager)],
) -> RequestResponse:
    """Approve, ship or reset a request.

    Args:
        request_id (str): The ID of the request.
        update (RequestStatusUpdate): The target status.
        db (AsyncSession): The database session.
        _ (Session): The manager session.

    Returns:
        RequestResponse: The updated request.
    """
    try:
        return await RequestService(db, SETTINGS.app_id).update_status(
            request_id, update.status
        )
    except RequestNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except (
        InvalidStatusTransitionError,
        InsufficientStockError,
        InventoryItemNotFoundError,
    ) as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
