"""Record service - distribution records and the citizen benefit card."""

import logging
import typing as t
import uuid
from datetime import timedelta

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.feeds import FEEDS
from foodaid.core.models import Collection, DistributionRecord, RecordStatus
from foodaid.schemas.auth import Session
from foodaid.schemas.record import (
    BenefitSummary,
    RecordListResponse,
    RecordResponse,
)
from foodaid.services.identity_service import generate_citizen_id
from foodaid.services.request_service import InvalidStatusTransitionError
from foodaid.utils.dates import as_utc, utc_now

LOGGER: logging.Logger = logging.getLogger(__name__)

NO_PICKUP_LOCATION: str = "TBD"


class RecordNotFoundError(Exception):
    """Raised when a distribution record is not found."""

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(f"Distribution record with ID {record_id} not found")


def visible_recipient(session: Session) -> str | None:
    """Equality filter applied to the records a session may see.

    Args:
        session (Session): The current session.

    Returns:
        str | None:
            The recipient ID citizens are restricted to,
            or None when every record is visible.
    """
    if session.is_citizen:
        return session.user_id
    return None


class RecordService:
    """Service class for distribution record operations."""

    db: AsyncSession
    app_id: str

    def __init__(self, db: AsyncSession, app_id: str) -> None:
        """Initialize RecordService.

        Args:
            db (AsyncSession): The database session.
            app_id (str): The tenant whose collection is used.
        """
        self.db = db
        self.app_id = app_id

    @staticmethod
    def convert_record_to_response(
        record: DistributionRecord,
    ) -> RecordResponse:
        """Convert DistributionRecord model to RecordResponse schema.

        Args:
            record (DistributionRecord): The record model.

        Returns:
            RecordResponse: The record response schema.
        """
        return RecordResponse(
            id=record.id,
            recipient_id=record.recipient_id,
            food_item=record.food_item,
            quantity=record.quantity,
            location=record.location,
            status=record.status,
            timestamp=as_utc(record.timestamp),
        )

    async def list_records(
        self, recipient_id: str | None = None
    ) -> RecordListResponse:
        """List distribution records, newest first.

        Args:
            recipient_id (str | None):
                When given, only records of this recipient are returned.

        Returns:
            RecordListResponse: The record snapshot.
        """
        query = select(DistributionRecord).where(
            DistributionRecord.app_id == self.app_id
        )
        if recipient_id is not None:
            query = query.where(DistributionRecord.recipient_id == recipient_id)

        records: t.List[RecordResponse] = [
            self.convert_record_to_response(record)
            for record in (await self.db.execute(query)).scalars().all()
        ]
        records.sort(key=lambda record: record.timestamp, reverse=True)
        return RecordListResponse(records=records, total=len(records))

    async def list_records_for(self, session: Session) -> RecordListResponse:
        """List the records visible to a session.

        Args:
            session (Session): The current session.

        Returns:
            RecordListResponse: The visible records.
        """
        return await self.list_records(visible_recipient(session))

    @staticmethod
    def summarize(records: t.Sequence[RecordResponse]) -> BenefitSummary:
        """Build the benefit card from newest-first records.

        Args:
            records (t.Sequence[RecordResponse]): The visible records.

        Returns:
            BenefitSummary: The benefit card.
        """
        pending: t.List[RecordResponse] = [
            record
            for record in records
            if record.status == RecordStatus.PENDING
        ]
        return BenefitSummary(
            pending_count=len(pending),
            completed_count=sum(
                1
                for record in records
                if record.status == RecordStatus.COMPLETED
            ),
            next_pickup_location=(
                pending[0].location if pending else NO_PICKUP_LOCATION
            ),
        )

    async def get_record_model(self, record_id: str) -> DistributionRecord:
        """Get the raw DistributionRecord model by ID.

        Args:
            record_id (str): The ID of the record.

        Returns:
            DistributionRecord: The record model.
        """
        record: DistributionRecord | None = (
            await self.db.execute(
                select(DistributionRecord).where(
                    DistributionRecord.app_id == self.app_id,
                    DistributionRecord.id == record_id,
                )
            )
        ).scalar_one_or_none()

        if record is None:
            raise RecordNotFoundError(record_id)

        return record

    async def complete(self, record_id: str) -> RecordResponse:
        """Mark a pending record as completed.

        Args:
            record_id (str): The ID of the record.

        Returns:
            RecordResponse: The updated record.
        """
        record: DistributionRecord = await self.get_record_model(record_id)

        result: CursorResult[t.Any] = t.cast(
            CursorResult[t.Any],
            await self.db.execute(
                update(DistributionRecord)
                .where(
                    DistributionRecord.app_id == self.app_id,
                    DistributionRecord.id == record_id,
                    DistributionRecord.status == RecordStatus.PENDING,
                )
                .values(status=RecordStatus.COMPLETED)
                .execution_options(synchronize_session=False)
            ),
        )
        if result.rowcount != 1:
            current: str = record.status.value
            await self.db.rollback()
            LOGGER.warning(
                "Rejected completion of record %s in status %s",
                record_id,
                current,
            )
            raise InvalidStatusTransitionError(
                current, RecordStatus.COMPLETED.value
            )

        await self.db.commit()
        await self.db.refresh(record)
        FEEDS.notify(self.app_id, Collection.DISTRIBUTION_RECORDS)

        LOGGER.info("Record %s marked completed", record_id)
        return self.convert_record_to_response(record)

    async def upload_sample_data(
        self, current_user_id: str
    ) -> t.List[RecordResponse]:
        """Insert a batch of sample distribution records.

        One record belongs to a fresh manager identity, three to fresh
        citizens and one to the current user. The batch is committed as
        a single transaction.

        Args:
            current_user_id (str): The identifier of the current user.

        Returns:
            t.List[RecordResponse]: The created records.
        """
        now = utc_now()
        samples: t.List[DistributionRecord] = [
            DistributionRecord(
                recipient_id=f"manager-{uuid.uuid4().hex[:8]}",
                food_item="Management Report",
                quantity=1,
                location="HQ",
                status=RecordStatus.COMPLETED,
                timestamp=now,
            ),
            DistributionRecord(
                recipient_id=generate_citizen_id(),
                food_item="Rice (5kg)",
                quantity=1,
                location="Central Hub A",
                status=RecordStatus.PENDING,
                timestamp=now - timedelta(seconds=100),
            ),
            DistributionRecord(
                recipient_id=generate_citizen_id(),
                food_item="Beans (1kg)",
                quantity=3,
                location="Local Center B",
                status=RecordStatus.COMPLETED,
                timestamp=now - timedelta(seconds=50),
            ),
            DistributionRecord(
                recipient_id=generate_citizen_id(),
                food_item="Oil (1L)",
                quantity=1,
                location="Central Hub A",
                status=RecordStatus.PENDING,
                timestamp=now - timedelta(seconds=10),
            ),
            DistributionRecord(
                recipient_id=current_user_id,
                food_item="Citizen Kit",
                quantity=1,
                location="Local Center D",
                status=RecordStatus.PENDING,
                timestamp=now,
            ),
        ]
        for record in samples:
            record.app_id = self.app_id

        self.db.add_all(samples)
        await self.db.commit()
        FEEDS.notify(self.app_id, Collection.DISTRIBUTION_RECORDS)

        LOGGER.info(
            "Sample data uploaded: %d distribution records", len(samples)
        )
        return [self.convert_record_to_response(record) for record in samples]
