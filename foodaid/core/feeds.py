"""Live feeds: push full collection snapshots to subscribers on change."""

import asyncio
import logging
import typing as t
from collections import defaultdict

from foodaid.core.models import Collection, collection_path

LOGGER: logging.Logger = logging.getLogger(__name__)

FeedKey = t.Tuple[str, Collection]
SnapshotLoader = t.Callable[[], t.Awaitable[t.List[t.Any]]]


class FeedError(Exception):
    """Raised when a feed cannot deliver a snapshot."""

    collection: Collection

    def __init__(self, collection: Collection) -> None:
        """Initialize FeedError.

        Args:
            collection (Collection): The collection the feed watches.
        """
        self.collection = collection
        super().__init__(f"Failed to fetch {collection.value} data")


class Subscription:
    """Cancellable handle delivering ordered snapshots of one collection.

    The first snapshot is delivered immediately; afterwards one snapshot
    follows every batch of change notifications received since the
    previous delivery. Iteration ends once ``close()`` is called.
    """

    key: FeedKey

    def __init__(
        self, hub: "FeedHub", key: FeedKey, loader: SnapshotLoader
    ) -> None:
        self.key = key
        self._hub = hub
        self._loader = loader
        self._changes: asyncio.Queue[bool] = asyncio.Queue()
        self._closed = False
        self._changes.put_nowait(True)

    @property
    def closed(self) -> bool:
        """Whether the subscription has been cancelled."""
        return self._closed

    def signal(self) -> None:
        """Mark the collection as changed."""
        if not self._closed:
            self._changes.put_nowait(True)

    def close(self) -> None:
        """Unsubscribe and wake any pending iteration."""
        if self._closed:
            return
        self._closed = True
        self._hub.remove(self)
        self._changes.put_nowait(False)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> t.List[t.Any]:
        if self._closed:
            raise StopAsyncIteration

        changed: bool = await self._changes.get()
        # Several changes collapse into one snapshot of the current state.
        while not self._changes.empty():
            changed = self._changes.get_nowait() and changed

        if not changed or self._closed:
            raise StopAsyncIteration

        try:
            return await self._loader()
        except Exception as exc:
            LOGGER.exception("Feed error on %s", collection_path(*self.key))
            self.close()
            raise FeedError(self.key[1]) from exc

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *_: t.Any) -> None:
        self.close()


class FeedHub:
    """Registry of live subscriptions per tenant and collection."""

    def __init__(self) -> None:
        self._subscribers: t.DefaultDict[FeedKey, t.List[Subscription]] = (
            defaultdict(list)
        )

    def subscribe(
        self, app_id: str, collection: Collection, loader: SnapshotLoader
    ) -> Subscription:
        """Subscribe to a collection.

        Args:
            app_id (str): The tenant identifier.
            collection (Collection): The collection to watch.
            loader (SnapshotLoader):
                Coroutine function returning the current, filtered and
                ordered snapshot.

        Returns:
            Subscription: The subscription handle.
        """
        subscription: Subscription = Subscription(
            self, (app_id, collection), loader
        )
        self._subscribers[subscription.key].append(subscription)
        LOGGER.debug("Subscribed to %s", collection_path(app_id, collection))
        return subscription

    def remove(self, subscription: Subscription) -> None:
        """Drop a subscription from the registry.

        Args:
            subscription (Subscription): The subscription to drop.
        """
        subscribers: t.List[Subscription] = self._subscribers.get(
            subscription.key, []
        )
        if subscription in subscribers:
            subscribers.remove(subscription)

    def notify(self, app_id: str, collection: Collection) -> int:
        """Notify subscribers that a collection changed.

        Args:
            app_id (str): The tenant identifier.
            collection (Collection): The changed collection.

        Returns:
            int: Number of subscriptions notified.
        """
        subscribers: t.Tuple[Subscription, ...] = tuple(
            self._subscribers.get((app_id, collection), [])
        )
        for subscription in subscribers:
            subscription.signal()
        return len(subscribers)

    def subscriber_count(self, app_id: str, collection: Collection) -> int:
        """Number of live subscriptions on a collection.

        Args:
            app_id (str): The tenant identifier.
            collection (Collection): The collection.

        Returns:
            int: The number of subscriptions.
        """
        return len(self._subscribers.get((app_id, collection), []))


FEEDS: FeedHub = FeedHub()
