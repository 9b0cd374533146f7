"""Live feed endpoints (Server-Sent Events)."""

import json
import typing as t

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from foodaid.core.auth import get_current_session
from foodaid.core.config import SETTINGS
from foodaid.core.database import ASYNC_SESSION_MAKER
from foodaid.core.feeds import FeedError, Subscription
from foodaid.core.models import Collection
from foodaid.schemas.auth import Session
from foodaid.services import FeedForbiddenError, FeedService

ROUTER = APIRouter(prefix="/feeds", tags=["Feeds"])


def format_event(event: str, data: t.Any) -> str:
    """Format one Server-Sent Event message.

    Args:
        event (str): The event name.
        data (t.Any): JSON-serializable payload.

    Returns:
        str: The encoded message.
    """
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


async def stream_snapshots(
    subscription: Subscription, request: Request
) -> t.AsyncGenerator[str, None]:
    """Relay snapshots until the client leaves or the feed fails.

    Args:
        subscription (Subscription): The open subscription.
        request (Request): The streaming request.

    Yields:
        str: Encoded ``snapshot`` events, then at most one ``error`` event.
    """
    async with subscription:
        try:
            async for snapshot in subscription:
                if await request.is_disconnected():
                    break
                yield format_event("snapshot", snapshot)
        except FeedError as exc:
            yield format_event("error", {"detail": str(exc)})


@ROUTER.get("/{collection}")
async def stream_collection(
    collection: Collection,
    request: Request,
    session: t.Annotated[Session, Depends(get_current_session)],
) -> StreamingResponse:
    """Stream live snapshots of a collection.

    Citizens may only follow distribution records and only see their own.

    Args:
        collection (Collection): The collection to follow.
        request (Request): The incoming request.
        session (Session): The signed-in session.

    Returns:
        StreamingResponse: The event stream.
    """
    try:
        subscription: Subscription = FeedService(
            ASYNC_SESSION_MAKER, SETTINGS.app_id
        ).open_feed(collection, session)
    except FeedForbiddenError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(exc),
        ) from exc

    return StreamingResponse(
        stream_snapshots(subscription, request),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
