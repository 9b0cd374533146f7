"""Feed service - live snapshots of the collections a session may read."""

import typing as t

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from foodaid.core.feeds import FEEDS, FeedHub, Subscription
from foodaid.core.models import Collection
from foodaid.schemas.auth import Session
from foodaid.services.inventory_service import InventoryService
from foodaid.services.record_service import RecordService, visible_recipient
from foodaid.services.request_service import RequestService

MANAGER_ONLY_COLLECTIONS: t.FrozenSet[Collection] = frozenset(
    {Collection.INVENTORY, Collection.REQUESTS}
)


class FeedForbiddenError(Exception):
    """Raised when a session may not read a collection."""

    def __init__(self, collection: Collection) -> None:
        self.collection = collection
        super().__init__(f"Not allowed to read {collection.value}")


class FeedService:
    """Opens live feeds bound to the current session."""

    session_maker: async_sessionmaker[AsyncSession]
    app_id: str
    hub: FeedHub

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        app_id: str,
        hub: FeedHub = FEEDS,
    ) -> None:
        """Initialize FeedService.

        Args:
            session_maker (async_sessionmaker[AsyncSession]):
                Factory for the short-lived sessions each snapshot uses.
            app_id (str): The tenant whose collections are watched.
            hub (FeedHub): The hub to subscribe on.
        """
        self.session_maker = session_maker
        self.app_id = app_id
        self.hub = hub

    async def load_snapshot(
        self, collection: Collection, recipient_id: str | None = None
    ) -> t.List[t.Dict[str, t.Any]]:
        """Read the current, newest-first snapshot of a collection.

        Args:
            collection (Collection): The collection to read.
            recipient_id (str | None):
                Equality filter on distribution records.

        Returns:
            t.List[t.Dict[str, t.Any]]: JSON-ready documents.
        """
        async with self.session_maker() as db:
            match collection:
                case Collection.INVENTORY:
                    inventory = await InventoryService(
                        db, self.app_id
                    ).list_items()
                    documents = inventory.items
                case Collection.REQUESTS:
                    requests = await RequestService(
                        db, self.app_id
                    ).list_requests()
                    documents = requests.requests
                case _:
                    records = await RecordService(
                        db, self.app_id
                    ).list_records(recipient_id)
                    documents = records.records

        return [
            document.model_dump(mode="json", by_alias=True)
            for document in documents
        ]

    def open_feed(
        self, collection: Collection, session: Session
    ) -> Subscription:
        """Subscribe the session to a collection.

        Args:
            collection (Collection): The collection to watch.
            session (Session): The current session.

        Returns:
            Subscription: The subscription handle.
        """
        if collection in MANAGER_ONLY_COLLECTIONS and not session.is_manager:
            raise FeedForbiddenError(collection)

        recipient_id: str | None = (
            visible_recipient(session)
            if collection == Collection.DISTRIBUTION_RECORDS
            else None
        )

        async def loader() -> t.List[t.Dict[str, t.Any]]:
            return await self.load_snapshot(collection, recipient_id)

        return self.hub.subscribe(self.app_id, collection, loader)
