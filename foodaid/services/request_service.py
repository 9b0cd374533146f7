"""Request service - submission and status workflow for aid requests."""

import logging
import typing as t

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.feeds import FEEDS
from foodaid.core.models import (
    Collection,
    DistributionRequest,
    InventoryItem,
    RequestStatus,
)
from foodaid.schemas.request import RequestListResponse, RequestResponse
from foodaid.services.inventory_service import (
    InventoryItemNotFoundError,
    InventoryService,
)
from foodaid.utils.dates import as_utc, utc_now, utc_today

LOGGER: logging.Logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: t.Dict[RequestStatus, t.FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED}),
    RequestStatus.APPROVED: frozenset(
        {RequestStatus.SHIPPED, RequestStatus.PENDING}
    ),
    RequestStatus.SHIPPED: frozenset({RequestStatus.PENDING}),
}


class RequestNotFoundError(Exception):
    """Raised when a distribution request is not found."""

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        super().__init__(f"Request with ID {request_id} not found")


class InvalidStatusTransitionError(Exception):
    """Raised when a status change is not an allowed transition."""

    current: str
    target: str

    def __init__(self, current: str, target: str) -> None:
        """Initialize InvalidStatusTransitionError.

        Args:
            current (str): The current status.
            target (str): The requested status.
        """
        self.current = current
        self.target = target
        super().__init__(f"Cannot change status from {current} to {target}")


class InsufficientStockError(Exception):
    """Raised when shipping would take the stock below zero."""

    item: str
    requested: int
    available: int

    def __init__(self, item: str, requested: int, available: int) -> None:
        """Initialize InsufficientStockError.

        Args:
            item (str): The inventory item name.
            requested (int): The amount to ship.
            available (int): The quantity in stock.
        """
        self.item = item
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock to ship {requested} units of {item}. "
            f"Only {available} available."
        )


def is_allowed_transition(
    current: RequestStatus, target: RequestStatus
) -> bool:
    """Check a status change against the request workflow.

    Args:
        current (RequestStatus): The current status.
        target (RequestStatus): The requested status.

    Returns:
        bool: True if the transition is allowed.
    """
    return target in ALLOWED_TRANSITIONS[current]


class RequestService:
    """Service class for distribution request operations."""

    db: AsyncSession
    app_id: str

    def __init__(self, db: AsyncSession, app_id: str) -> None:
        """Initialize RequestService.

        Args:
            db (AsyncSession): The database session.
            app_id (str): The tenant whose collections are used.
        """
        self.db = db
        self.app_id = app_id

    @staticmethod
    def convert_request_to_response(
        request: DistributionRequest, stock: t.Mapping[str, int]
    ) -> RequestResponse:
        """Convert DistributionRequest model to RequestResponse schema.

        Args:
            request (DistributionRequest): The request model.
            stock (t.Mapping[str, int]): Quantities keyed by item name.

        Returns:
            RequestResponse: The request response schema.
        """
        available: int = stock.get(request.item, 0)
        return RequestResponse(
            id=request.id,
            organization=request.organization,
            item=request.item,
            amount=request.amount,
            status=request.status,
            contact_email=request.contact_email,
            requested_date=request.requested_date,
            timestamp=as_utc(request.timestamp),
            processed_by=(
                as_utc(request.processed_by) if request.processed_by else None
            ),
            available=available,
            is_shippable=(
                request.status == RequestStatus.APPROVED
                and request.item in stock
                and available >= request.amount
            ),
        )

    async def _stock(self) -> t.Dict[str, int]:
        return await InventoryService(self.db, self.app_id).stock_by_name()

    async def list_requests(self) -> RequestListResponse:
        """List the request collection, newest first.

        Returns:
            RequestListResponse: The request snapshot.
        """
        requests: t.Sequence[DistributionRequest] = (
            (
                await self.db.execute(
                    select(DistributionRequest)
                    .where(DistributionRequest.app_id == self.app_id)
                    .order_by(DistributionRequest.timestamp.desc())
                )
            )
            .scalars()
            .all()
        )
        stock: t.Dict[str, int] = await self._stock()
        responses: t.List[RequestResponse] = [
            self.convert_request_to_response(request, stock)
            for request in requests
        ]
        return RequestListResponse(requests=responses, total=len(responses))

    async def get_request_model(self, request_id: str) -> DistributionRequest:
        """Get the raw DistributionRequest model by ID.

        Args:
            request_id (str): The ID of the request.

        Returns:
            DistributionRequest: The request model.
        """
        request: DistributionRequest | None = (
            await self.db.execute(
                select(DistributionRequest).where(
                    DistributionRequest.app_id == self.app_id,
                    DistributionRequest.id == request_id,
                )
            )
        ).scalar_one_or_none()

        if request is None:
            raise RequestNotFoundError(request_id)

        return request

    async def get_request(self, request_id: str) -> RequestResponse:
        """Get a request by ID.

        Args:
            request_id (str): The ID of the request.

        Returns:
            RequestResponse: The request response schema.
        """
        request: DistributionRequest = await self.get_request_model(
            request_id
        )
        return self.convert_request_to_response(request, await self._stock())

    async def submit(
        self,
        organization: str,
        item: str,
        amount: int,
        contact_email: str | None,
    ) -> RequestResponse:
        """Insert a new pending request.

        Args:
            organization (str): The requesting organization.
            item (str): The name of the requested inventory item.
            amount (int): The amount requested.
            contact_email (str | None): Contact address of the organization.

        Returns:
            RequestResponse: The created request.
        """
        request: DistributionRequest = DistributionRequest(
            app_id=self.app_id,
            organization=organization,
            item=item,
            amount=amount,
            contact_email=contact_email,
            status=RequestStatus.PENDING,
            requested_date=utc_today(),
            timestamp=utc_now(),
        )
        self.db.add(request)
        await self.db.commit()
        await self.db.refresh(request)
        FEEDS.notify(self.app_id, Collection.REQUESTS)

        LOGGER.info(
            "Request %s submitted by %s: %d x %s",
            request.id,
            organization,
            amount,
            item,
        )
        return self.convert_request_to_response(request, await self._stock())

    async def update_status(
        self, request_id: str, new_status: RequestStatus
    ) -> RequestResponse:
        """Move a request to a new status.

        Shipping decrements the referenced inventory item in the same
        transaction as the status change, and only if enough stock is
        left at the time of the write.

        Args:
            request_id (str): The ID of the request.
            new_status (RequestStatus): The target status.

        Returns:
            RequestResponse: The updated request.
        """
        request: DistributionRequest = await self.get_request_model(
            request_id
        )
        current: RequestStatus = request.status

        if not is_allowed_transition(current, new_status):
            LOGGER.warning(
                "Rejected transition %s -> %s for request %s",
                current.value,
                new_status.value,
                request_id,
            )
            raise InvalidStatusTransitionError(current.value, new_status.value)

        if new_status == RequestStatus.SHIPPED:
            await self._ship(request_id, request.item, request.amount)
        else:
            await self._set_status(request_id, current, new_status)

        await self.db.refresh(request)
        FEEDS.notify(self.app_id, Collection.REQUESTS)
        if new_status == RequestStatus.SHIPPED:
            FEEDS.notify(self.app_id, Collection.INVENTORY)

        LOGGER.info(
            "Request %s status updated to %s", request_id, new_status.value
        )
        return self.convert_request_to_response(request, await self._stock())

    async def _set_status(
        self,
        request_id: str,
        current: RequestStatus,
        new_status: RequestStatus,
    ) -> None:
        result: CursorResult[t.Any] = t.cast(
            CursorResult[t.Any],
            await self.db.execute(
                update(DistributionRequest)
                .where(
                    DistributionRequest.app_id == self.app_id,
                    DistributionRequest.id == request_id,
                    DistributionRequest.status == current,
                )
                .values(
                    status=new_status,
                    processed_by=(
                        None
                        if new_status == RequestStatus.PENDING
                        else utc_now()
                    ),
                )
                .execution_options(synchronize_session=False)
            ),
        )
        if result.rowcount != 1:
            await self.db.rollback()
            raise InvalidStatusTransitionError(current.value, new_status.value)

        await self.db.commit()

    async def _ship(self, request_id: str, item: str, amount: int) -> None:
        now = utc_now()

        shipped: CursorResult[t.Any] = t.cast(
            CursorResult[t.Any],
            await self.db.execute(
                update(DistributionRequest)
                .where(
                    DistributionRequest.app_id == self.app_id,
                    DistributionRequest.id == request_id,
                    DistributionRequest.status == RequestStatus.APPROVED,
                )
                .values(status=RequestStatus.SHIPPED, processed_by=now)
                .execution_options(synchronize_session=False)
            ),
        )
        if shipped.rowcount != 1:
            await self.db.rollback()
            raise InvalidStatusTransitionError(
                RequestStatus.APPROVED.value, RequestStatus.SHIPPED.value
            )

        decremented: CursorResult[t.Any] = t.cast(
            CursorResult[t.Any],
            await self.db.execute(
                update(InventoryItem)
                .where(
                    InventoryItem.app_id == self.app_id,
                    InventoryItem.item == item,
                    InventoryItem.quantity >= amount,
                )
                .values(
                    quantity=InventoryItem.quantity - amount,
                    last_updated=now,
                )
                .execution_options(synchronize_session=False)
            ),
        )
        if decremented.rowcount != 1:
            await self.db.rollback()
            stock: InventoryItem | None = await InventoryService(
                self.db, self.app_id
            ).find_by_name(item)
            if stock is None:
                LOGGER.warning(
                    "Inventory item not found for %s. Cannot ship.", item
                )
                raise InventoryItemNotFoundError(item)
            LOGGER.warning(
                "Insufficient stock to ship %d units of %s (%d available)",
                amount,
                item,
                stock.quantity,
            )
            raise InsufficientStockError(item, amount, stock.quantity)

        await self.db.commit()
