"""Tests for distribution records and the benefit card."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from foodaid.core.models import RecordStatus, UserRole
from foodaid.schemas.auth import Session
from foodaid.services.record_service import (
    NO_PICKUP_LOCATION,
    RecordNotFoundError,
    RecordService,
    visible_recipient,
)
from foodaid.services.request_service import InvalidStatusTransitionError
from tests.conftest import APP_ID, add_record, read_record

ALICE = Session(user_id="citizen-alice01", role=UserRole.CITIZEN)
MANAGER = Session(user_id="manager-test", role=UserRole.MANAGER)


def test_visible_recipient() -> None:
    assert visible_recipient(ALICE) == "citizen-alice01"
    assert visible_recipient(MANAGER) is None


async def test_citizen_sees_only_own_records(db: AsyncSession) -> None:
    own = await add_record("citizen-alice01")
    await add_record("citizen-bob0002")
    await add_record("citizen-carol03")

    result = await RecordService(db, APP_ID).list_records_for(ALICE)

    assert [record.id for record in result.records] == [own]
    assert result.total == 1


async def test_manager_sees_all_records_newest_first(
    db: AsyncSession,
) -> None:
    now = datetime.now(timezone.utc)
    oldest = await add_record("citizen-a", timestamp=now - timedelta(hours=2))
    newest = await add_record("citizen-b", timestamp=now)
    middle = await add_record("citizen-c", timestamp=now - timedelta(hours=1))

    result = await RecordService(db, APP_ID).list_records_for(MANAGER)

    assert [record.id for record in result.records] == [newest, middle, oldest]


async def test_complete_pending_record(db: AsyncSession) -> None:
    record_id = await add_record("citizen-alice01")

    response = await RecordService(db, APP_ID).complete(record_id)

    assert response.status == RecordStatus.COMPLETED
    assert (await read_record(record_id)).status == RecordStatus.COMPLETED


async def test_completing_twice_is_rejected(db: AsyncSession) -> None:
    record_id = await add_record(
        "citizen-alice01", status=RecordStatus.COMPLETED
    )

    with pytest.raises(InvalidStatusTransitionError):
        await RecordService(db, APP_ID).complete(record_id)


async def test_complete_unknown_record(db: AsyncSession) -> None:
    with pytest.raises(RecordNotFoundError):
        await RecordService(db, APP_ID).complete("missing")


async def test_summary_uses_newest_pending_location(db: AsyncSession) -> None:
    now = datetime.now(timezone.utc)
    await add_record(
        "citizen-alice01",
        location="Central Hub A",
        timestamp=now - timedelta(days=2),
    )
    await add_record(
        "citizen-alice01",
        location="Local Center B",
        timestamp=now - timedelta(days=1),
    )
    await add_record(
        "citizen-alice01",
        location="HQ",
        status=RecordStatus.COMPLETED,
        timestamp=now,
    )
    service = RecordService(db, APP_ID)

    summary = service.summarize(
        (await service.list_records_for(ALICE)).records
    )

    assert summary.pending_count == 2
    assert summary.completed_count == 1
    assert summary.next_pickup_location == "Local Center B"


def test_summary_without_pending_records() -> None:
    summary = RecordService.summarize([])

    assert summary.pending_count == 0
    assert summary.completed_count == 0
    assert summary.next_pickup_location == NO_PICKUP_LOCATION


async def test_upload_sample_data(db: AsyncSession) -> None:
    service = RecordService(db, APP_ID)

    created = await service.upload_sample_data("manager-test")

    assert len(created) == 5
    assert (await service.list_records()).total == 5
    own = await service.list_records("manager-test")
    assert [record.food_item for record in own.records] == ["Citizen Kit"]
    assert own.records[0].location == "Local Center D"
    recipients = {record.recipient_id for record in created}
    assert sum(1 for r in recipients if r.startswith("citizen-")) == 3
