"""SQLAlchemy document models.

Each model is one collection of the document store. Every document is
partitioned by ``app_id`` so a single database can host several tenants,
and the collection path of a document is
``artifacts/{app_id}/public/data/{collection}``.
"""

import enum
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from foodaid.core.database import Base
from foodaid.utils.dates import calculate_days_until, utc_now


class Collection(str, enum.Enum):
    """Names of the document collections."""

    INVENTORY = "inventory"
    REQUESTS = "requests"
    DISTRIBUTION_RECORDS = "distribution_records"


def collection_path(app_id: str, collection: Collection) -> str:
    """Build the conventional path of a collection.

    Args:
        app_id (str): The tenant identifier.
        collection (Collection): The collection.

    Returns:
        str: The collection path.
    """
    return f"artifacts/{app_id}/public/data/{collection.value}"


def new_document_id() -> str:
    """Generate an auto document ID."""
    return uuid.uuid4().hex


class UserRole(str, enum.Enum):
    """Coarse role carried by a session."""

    MANAGER = "manager"
    CITIZEN = "citizen"


class RequestStatus(str, enum.Enum):
    """Status of a distribution request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    SHIPPED = "Shipped"


class RecordStatus(str, enum.Enum):
    """Status of a distribution record."""

    PENDING = "Pending"
    COMPLETED = "Completed"


class InventoryItem(Base):  # pylint: disable=too-few-public-methods
    """Inventory item document."""

    __tablename__ = "inventory"

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=new_document_id
    )
    app_id: Mapped[str] = mapped_column(String(100), nullable=False)
    item: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    expiration: Mapped[date] = mapped_column(Date, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        UniqueConstraint("app_id", "item", name="uq_inventory_app_item"),
        Index("ix_inventory_app_id", "app_id"),
    )

    def is_low_stock(self, threshold: int = 50) -> bool:
        """Whether the quantity is below the low-stock threshold.

        Args:
            threshold (int, optional):
                Quantity under which stock is considered low.
                Defaults to 50.

        Returns:
            bool: True if stock is low.
        """
        return self.quantity < threshold

    def is_near_expiry(self, days: int = 60) -> bool:
        """Whether the item expires within the given number of days.

        Args:
            days (int, optional):
                Window in days. Defaults to 60.

        Returns:
            bool: True if the item expires within the window.
        """
        return calculate_days_until(self.expiration) < days


class DistributionRequest(Base):  # pylint: disable=too-few-public-methods
    """Request for food aid submitted by a community organization."""

    __tablename__ = "requests"

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=new_document_id
    )
    app_id: Mapped[str] = mapped_column(String(100), nullable=False)
    organization: Mapped[str] = mapped_column(String(200), nullable=False)
    item: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        Enum(RequestStatus), nullable=False, default=RequestStatus.PENDING
    )
    contact_email: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    requested_date: Mapped[date] = mapped_column(Date, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    processed_by: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (Index("ix_requests_app_id", "app_id"),)


class DistributionRecord(Base):  # pylint: disable=too-few-public-methods
    """Record of food handed (or due) to a recipient."""

    __tablename__ = "distribution_records"

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=new_document_id
    )
    app_id: Mapped[str] = mapped_column(String(100), nullable=False)
    recipient_id: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )
    food_item: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[RecordStatus] = mapped_column(
        Enum(RecordStatus), nullable=False, default=RecordStatus.PENDING
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (Index("ix_distribution_records_app_id", "app_id"),)
