"""Shared fixtures: a throwaway SQLite store and an ASGI client."""

import os
import tempfile
import typing as t
from datetime import date, datetime, timezone
from pathlib import Path

_TEST_DIR: Path = Path(tempfile.mkdtemp(prefix="foodaid-tests-"))

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR / 'test.db'}"
os.environ["APP_ID"] = "test-app"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["SMTP_ENABLED"] = "false"

# pylint: disable=wrong-import-position
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from foodaid.core.database import (  # noqa: E402
    ASYNC_SESSION_MAKER,
    ENGINE,
    Base,
    close_db,
)
from foodaid.core.models import (  # noqa: E402
    DistributionRecord,
    DistributionRequest,
    InventoryItem,
    RecordStatus,
    RequestStatus,
    UserRole,
)
from foodaid.services.identity_service import IdentityService  # noqa: E402

APP_ID: str = "test-app"


@pytest.fixture(autouse=True)
async def database() -> t.AsyncGenerator[None, None]:
    """Recreate every collection for each test."""
    async with ENGINE.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_db()


@pytest.fixture
async def db() -> t.AsyncGenerator[AsyncSession, None]:
    async with ASYNC_SESSION_MAKER() as session:
        yield session


@pytest.fixture
async def client() -> t.AsyncGenerator[AsyncClient, None]:
    from foodaid.main import (  # pylint: disable=import-outside-toplevel
        APPLICATION,
    )

    async with AsyncClient(
        transport=ASGITransport(app=APPLICATION), base_url="http://test"
    ) as http_client:
        yield http_client


@pytest.fixture
def manager_token() -> str:
    return IdentityService.issue_token(
        "manager-test", UserRole.MANAGER
    ).access_token


@pytest.fixture
def citizen_token() -> str:
    return IdentityService.issue_token(
        "citizen-alice01", UserRole.CITIZEN
    ).access_token


@pytest.fixture
def manager_headers(manager_token: str) -> t.Dict[str, str]:
    return {"Authorization": f"Bearer {manager_token}"}


@pytest.fixture
def citizen_headers(citizen_token: str) -> t.Dict[str, str]:
    return {"Authorization": f"Bearer {citizen_token}"}


async def add_inventory(
    item: str,
    quantity: int,
    unit: str = "boxes",
    expiration: date = date(2030, 1, 1),
) -> str:
    """Insert an inventory item directly and return its ID."""
    async with ASYNC_SESSION_MAKER() as session:
        document = InventoryItem(
            app_id=APP_ID,
            item=item,
            quantity=quantity,
            unit=unit,
            expiration=expiration,
        )
        session.add(document)
        await session.commit()
        return document.id


async def add_request(
    item: str,
    amount: int,
    status: RequestStatus = RequestStatus.PENDING,
    organization: str = "Food Bank Central",
    timestamp: datetime | None = None,
) -> str:
    """Insert a distribution request directly and return its ID."""
    async with ASYNC_SESSION_MAKER() as session:
        document = DistributionRequest(
            app_id=APP_ID,
            organization=organization,
            item=item,
            amount=amount,
            status=status,
            contact_email="bank@example.org",
            requested_date=date(2025, 10, 7),
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        session.add(document)
        await session.commit()
        return document.id


async def add_record(
    recipient_id: str,
    food_item: str = "Rice (5kg)",
    location: str = "Central Hub A",
    status: RecordStatus = RecordStatus.PENDING,
    timestamp: datetime | None = None,
) -> str:
    """Insert a distribution record directly and return its ID."""
    async with ASYNC_SESSION_MAKER() as session:
        document = DistributionRecord(
            app_id=APP_ID,
            recipient_id=recipient_id,
            food_item=food_item,
            quantity=1,
            location=location,
            status=status,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        session.add(document)
        await session.commit()
        return document.id


async def read_inventory(item_id: str) -> InventoryItem:
    """Read an inventory item through a fresh session."""
    async with ASYNC_SESSION_MAKER() as session:
        document = await session.get(InventoryItem, item_id)
        assert document is not None
        return document


async def read_request(request_id: str) -> DistributionRequest:
    """Read a request through a fresh session."""
    async with ASYNC_SESSION_MAKER() as session:
        document = await session.get(DistributionRequest, request_id)
        assert document is not None
        return document


async def read_record(record_id: str) -> DistributionRecord:
    """Read a distribution record through a fresh session."""
    async with ASYNC_SESSION_MAKER() as session:
        document = await session.get(DistributionRecord, record_id)
        assert document is not None
        return document
