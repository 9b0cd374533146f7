"""Web public request form routes."""

import typing as t

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.config import SETTINGS
from foodaid.core.database import get_db
from foodaid.core.globals import DEFAULT_REQUEST_ITEMS, TEMPLATES
from foodaid.schemas.request import RequestCreate, RequestResponse
from foodaid.services import InventoryService, RequestService

ROUTER: APIRouter = APIRouter()


async def get_request_items(db: AsyncSession) -> t.List[str]:
    """Item names offered by the form.

    Args:
        db (AsyncSession): The database session.

    Returns:
        t.List[str]: Inventory item names, or the default catalogue.
    """
    names: t.List[str] = await InventoryService(
        db, SETTINGS.app_id
    ).item_names()
    return names or list(DEFAULT_REQUEST_ITEMS)


@ROUTER.get("/request", response_class=HTMLResponse)
async def request_form_page(
    request: Request,
    db: t.Annotated[AsyncSession, Depends(get_db)],
) -> HTMLResponse:
    """Render the public request form.

    Args:
        request (Request): The incoming request.
        db (AsyncSession): The database session.

    Returns:
        HTMLResponse: The rendered form.
    """
    return TEMPLATES.TemplateResponse(
        request,
        "pages/request_form.html",
        {
            "items": await get_request_items(db),
            "form": {"amount": 10},
        },
    )


@ROUTER.post("/request", response_class=HTMLResponse)
async def request_form_submit(  # pylint: disable=too-many-arguments,too-many-positional-arguments,line-too-long  # noqa: E501
    request: Request,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    organization: str = Form(...),
    item: str = Form(...),
    amount: str = Form(...),
    contact_email: str = Form(...),
) -> HTMLResponse:
    """Handle public request form submission.

    Args:
        request (Request): The incoming request.
        db (AsyncSession): The database session.
        organization (str): The requesting organization.
        item (str): The requested item.
        amount (str): The requested amount, validated as a whole number.
        contact_email (str): The contact address.

    Returns:
        HTMLResponse:
            The form with a confirmation, or with an error on invalid input.
    """
    form: t.Dict[str, t.Any] = {
        "organization": organization,
        "item": item,
        "amount": amount,
        "contact_email": contact_email,
    }

    try:
        data: RequestCreate = RequestCreate(**form)
    except ValidationError:
        return TEMPLATES.TemplateResponse(
            request,
            "pages/request_form.html",
            {
                "items": await get_request_items(db),
                "form": form,
                "error": (
                    "Please fill in every field with a valid email "
                    "and an amount of at least 1."
                ),
            },
            status_code=422,
        )

    created: RequestResponse = await RequestService(
        db, SETTINGS.app_id
    ).submit(
        organization=data.organization,
        item=data.item,
        amount=data.amount,
        contact_email=data.contact_email,
    )

    return TEMPLATES.TemplateResponse(
        request,
        "pages/request_form.html",
        {
            "items": await get_request_items(db),
            "form": {"amount": 10},
            "submitted": created,
        },
    )
