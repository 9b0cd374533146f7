"""Web manager dashboard routes."""

import typing as t
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.auth import get_current_web_session
from foodaid.core.config import SETTINGS
from foodaid.core.database import get_db
from foodaid.core.globals import TEMPLATES
from foodaid.core.models import RequestStatus
from foodaid.schemas.auth import Session
from foodaid.services import (
    InsufficientStockError,
    InvalidStatusTransitionError,
    InventoryItemNotFoundError,
    InventoryService,
    RecordNotFoundError,
    RecordService,
    RequestNotFoundError,
    RequestService,
)
from foodaid.services.init_service import seed_if_empty

ROUTER: APIRouter = APIRouter()


def _back_to_dashboard(
    message: str | None = None, error: str | None = None
) -> RedirectResponse:
    url: str = "/web/dashboard"
    if error is not None:
        url += f"?error={quote(error)}"
    elif message is not None:
        url += f"?message={quote(message)}"
    return RedirectResponse(url=url, status_code=303)


def _manager_or_redirect(
    request: Request,
) -> t.Tuple[Session | None, RedirectResponse | None]:
    session: Session | None = get_current_web_session(request)
    if session is None:
        return None, RedirectResponse(url="/web/login", status_code=303)
    if not session.is_manager:
        return None, RedirectResponse(url="/web/portal", status_code=303)
    return session, None


@ROUTER.get("/dashboard", response_class=HTMLResponse, response_model=None)
async def dashboard(
    request: Request,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    message: str | None = None,
    error: str | None = None,
) -> RedirectResponse | HTMLResponse:
    """Render the manager dashboard.

    Args:
        request (Request): The incoming request.
        db (AsyncSession): The database session.
        message (str | None): Optional success message.
        error (str | None): Optional error message.

    Returns:
        RedirectResponse | HTMLResponse:
            The dashboard or a redirect if unauthorized.
    """
    session, redirect = _manager_or_redirect(request)
    if redirect is not None:
        return redirect

    inventory_service: InventoryService = InventoryService(
        db, SETTINGS.app_id
    )
    record_service: RecordService = RecordService(db, SETTINGS.app_id)

    return TEMPLATES.TemplateResponse(
        request,
        "pages/dashboard.html",
        {
            "session": session,
            "app_id": SETTINGS.app_id,
            "stats": await inventory_service.get_statistics(),
            "inventory": (await inventory_service.list_items()).items,
            "requests": (
                await RequestService(db, SETTINGS.app_id).list_requests()
            ).requests,
            "records": (await record_service.list_records()).records,
            "restock_increment": SETTINGS.restock_increment,
            "message": message,
            "error": error,
        },
    )


@ROUTER.post("/inventory/{item_id}/restock")
async def restock_item(
    request: Request,
    item_id: str,
    db: t.Annotated[AsyncSession, Depends(get_db)],
) -> RedirectResponse:
    """Add the fixed restock increment to an item.

    Args:
        request (Request): The incoming request.
        item_id (str): The ID of the inventory item.
        db (AsyncSession): The database session.

    Returns:
        RedirectResponse: A redirect back to the dashboard.
    """
    _, redirect = _manager_or_redirect(request)
    if redirect is not None:
        return redirect

    try:
        await InventoryService(db, SETTINGS.app_id).restock(item_id)
    except InventoryItemNotFoundError as exc:
        return _back_to_dashboard(error=str(exc))
    return _back_to_dashboard()


@ROUTER.post("/inventory/seed")
async def seed_inventory(
    request: Request,
    db: t.Annotated[AsyncSession, Depends(get_db)],
) -> RedirectResponse:
    """Seed starter data into an empty inventory.

    Args:
        request (Request): The incoming request.
        db (AsyncSession): The database session.

    Returns:
        RedirectResponse: A redirect back to the dashboard.
    """
    _, redirect = _manager_or_redirect(request)
    if redirect is not None:
        return redirect

    if await seed_if_empty(db, SETTINGS.app_id):
        return _back_to_dashboard(message="Starter data seeded")
    return _back_to_dashboard(message="Inventory already has data")


@ROUTER.post("/requests/{request_id}/status")
async def update_request_status(
    request: Request,
    request_id: str,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    status: RequestStatus = Form(...),
) -> RedirectResponse:
    """Approve, ship or reset a request.

    Args:
        request (Request): The incoming request.
        request_id (str): The ID of the request.
        db (AsyncSession): The database session.
        status (RequestStatus): The target status.

    Returns:
        RedirectResponse: A redirect back to the dashboard.
    """
    _, redirect = _manager_or_redirect(request)
    if redirect is not None:
        return redirect

    try:
        await RequestService(db, SETTINGS.app_id).update_status(
            request_id, status
        )
    except (
        RequestNotFoundError,
        InvalidStatusTransitionError,
        InsufficientStockError,
        InventoryItemNotFoundError,
    ) as exc:
        return _back_to_dashboard(error=str(exc))
    return _back_to_dashboard(message=f"Request updated to {status.value}")


@ROUTER.post("/records/{record_id}/complete")
async def complete_record(
    request: Request,
    record_id: str,
    db: t.Annotated[AsyncSession, Depends(get_db)],
) -> RedirectResponse:
    """Mark a distribution record as completed.

    Args:
        request (Request): The incoming request.
        record_id (str): The ID of the record.
        db (AsyncSession): The database session.

    Returns:
        RedirectResponse: A redirect back to the dashboard.
    """
    _, redirect = _manager_or_redirect(request)
    if redirect is not None:
        return redirect

    try:
        await RecordService(db, SETTINGS.app_id).complete(record_id)
    except (RecordNotFoundError, InvalidStatusTransitionError) as exc:
        return _back_to_dashboard(error=str(exc))
    return _back_to_dashboard()


@ROUTER.post("/records/sample")
async def upload_sample_data(
    request: Request,
    db: t.Annotated[AsyncSession, Depends(get_db)],
) -> RedirectResponse:
    """Add sample distribution records.

    Args:
        request (Request): The incoming request.
        db (AsyncSession): The database session.

    Returns:
        RedirectResponse: A redirect back to the dashboard.
    """
    session, redirect = _manager_or_redirect(request)
    if session is None:
        return t.cast(RedirectResponse, redirect)

    await RecordService(db, SETTINGS.app_id).upload_sample_data(
        session.user_id
    )
    return _back_to_dashboard(message="Sample distribution data added")
