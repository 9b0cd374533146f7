"""Web citizen portal routes."""

import typing as t

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.auth import get_current_web_session
from foodaid.core.config import SETTINGS
from foodaid.core.database import get_db
from foodaid.core.globals import TEMPLATES
from foodaid.schemas.auth import Session
from foodaid.schemas.record import RecordListResponse
from foodaid.services import RecordService

ROUTER: APIRouter = APIRouter()


@ROUTER.get("/portal", response_class=HTMLResponse, response_model=None)
async def portal(
    request: Request,
    db: t.Annotated[AsyncSession, Depends(get_db)],
) -> RedirectResponse | HTMLResponse:
    """Render the citizen portal with the session's own records.

    Args:
        request (Request): The incoming request.
        db (AsyncSession): The database session.

    Returns:
        RedirectResponse | HTMLResponse:
            The portal page or a redirect to sign-in.
    """
    session: Session | None = get_current_web_session(request)
    if session is None:
        return RedirectResponse(url="/web/login", status_code=303)

    service: RecordService = RecordService(db, SETTINGS.app_id)
    result: RecordListResponse = await service.list_records(session.user_id)

    return TEMPLATES.TemplateResponse(
        request,
        "pages/portal.html",
        {
            "session": session,
            "app_id": SETTINGS.app_id,
            "records": result.records,
            "summary": service.summarize(result.records),
        },
    )
