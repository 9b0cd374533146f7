"""Distribution record endpoints."""

import typing as t

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.auth import get_current_session, require_manager
from foodaid.core.config import SETTINGS
from foodaid.core.database import get_db
from foodaid.schemas.auth import Session
from foodaid.schemas.record import (
    BenefitSummary,
    RecordListResponse,
    RecordResponse,
)
from foodaid.services import (
    InvalidStatusTransitionError,
    RecordNotFoundError,
    RecordService,
)

ROUTER = APIRouter(prefix="/records", tags=["Distribution Records"])


@ROUTER.get("", response_model=RecordListResponse)
async def list_records(
    db: t.Annotated[AsyncSession, Depends(get_db)],
    session: t.Annotated[Session, Depends(get_current_session)],
) -> RecordListResponse:
    """List the records visible to the session, newest first.

    Citizens only receive their own records.

    Args:
        db (AsyncSession): The database session.
        session (Session): The signed-in session.

    Returns:
        RecordListResponse: The visible records.
    """
    return await RecordService(db, SETTINGS.app_id).list_records_for(session)


@ROUTER.get("/summary", response_model=BenefitSummary)
async def get_benefit_summary(
    db: t.Annotated[AsyncSession, Depends(get_db)],
    session: t.Annotated[Session, Depends(get_current_session)],
) -> BenefitSummary:
    """Get the benefit card for the visible records.

    Args:
        db (AsyncSession): The database session.
        session (Session): The signed-in session.

    Returns:
        BenefitSummary: Pending and completed counts and next pickup.
    """
    service: RecordService = RecordService(db, SETTINGS.app_id)
    return service.summarize(
        (await service.list_records_for(session)).records
    )


@ROUTER.post(
    "/sample",
    response_model=t.List[RecordResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upload_sample_data(
    db: t.Annotated[AsyncSession, Depends(get_db)],
    session: t.Annotated[Session, Depends(require_manager)],
) -> t.List[RecordResponse]:
    """Insert a batch of sample distribution records.

    Args:
        db (AsyncSession): The database session.
        session (Session): The manager session.

    Returns:
        t.List[RecordResponse]: The created records.
    """
    return await RecordService(db, SETTINGS.app_id).upload_sample_data(
        session.user_id
    )


@ROUTER.post("/{record_id}/complete", response_model=RecordResponse)
async def complete_record(
    record_id: str,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    _: t.Annotated[Session, Depends(require_manager)],
) -> RecordResponse:
    """Mark a pending record as completed.

    Args:
        record_id (str): The ID of the record.
        db (AsyncSession): The database session.
        _ (Session): The manager session.

    Returns:
        RecordResponse: The updated record.
    """
    try:
        return await RecordService(db, SETTINGS.app_id).complete(record_id)
    except RecordNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except InvalidStatusTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
