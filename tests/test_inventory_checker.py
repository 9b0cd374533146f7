"""Tests for the scheduled inventory alert check."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

from foodaid.core.config import SETTINGS
from foodaid.services import inventory_checker
from foodaid.services.inventory_checker import (
    check_inventory_task,
    format_inventory_report,
    get_inventory_alerts,
    send_email_notification,
)
from foodaid.utils.dates import utc_today
from tests.conftest import add_inventory


async def test_alerts_list_low_and_expiring_items() -> None:
    await add_inventory("Dairy (UHT Milk)", 30)
    await add_inventory(
        "Fresh Produce Mix", 120, expiration=utc_today() + timedelta(days=3)
    )
    await add_inventory("Dry Pasta", 600)

    alerts = await get_inventory_alerts()

    assert [item["item"] for item in alerts["low_stock"]] == [
        "Dairy (UHT Milk)"
    ]
    assert [item["item"] for item in alerts["near_expiry"]] == [
        "Fresh Produce Mix"
    ]


def test_report_lists_each_section() -> None:
    report = format_inventory_report(
        {
            "checked_at": "2025-10-08T00:00:00+00:00",
            "low_stock": [
                {"item": "Dairy (UHT Milk)", "quantity": 30, "unit": "gallons"}
            ],
            "near_expiry": [
                {
                    "item": "Fresh Produce Mix",
                    "quantity": 120,
                    "expiration": "2025-10-15",
                }
            ],
        }
    )

    assert "FOODAID INVENTORY REPORT" in report
    assert "Dairy (UHT Milk): 30 gallons" in report
    assert "Expires: 2025-10-15" in report


def test_report_when_nothing_to_flag() -> None:
    report = format_inventory_report(
        {"checked_at": "now", "low_stock": [], "near_expiry": []}
    )

    assert "All stock levels and dates are fine." in report


async def test_email_skipped_when_smtp_disabled() -> None:
    with patch.object(inventory_checker.aiosmtplib, "send") as send:
        assert await send_email_notification("s", "b", "a@b.org") is False

    send.assert_not_called()


async def test_task_sends_one_email_per_recipient() -> None:
    await add_inventory("Dairy (UHT Milk)", 30)

    with (
        patch.object(SETTINGS, "smtp_enabled", True),
        patch.object(
            SETTINGS, "alert_recipients", ["ops@example.org", "hq@example.org"]
        ),
        patch.object(
            inventory_checker.aiosmtplib, "send", new=AsyncMock()
        ) as send,
    ):
        await check_inventory_task()

    assert send.await_count == 2


async def test_task_logs_failures_instead_of_raising() -> None:
    with patch.object(
        inventory_checker,
        "get_inventory_alerts",
        new=AsyncMock(side_effect=RuntimeError("store down")),
    ):
        await check_inventory_task()


async def test_failed_recipient_does_not_block_the_rest() -> None:
    await add_inventory("Dairy (UHT Milk)", 30)
    send = AsyncMock(side_effect=[OSError("connection refused"), None])

    with (
        patch.object(SETTINGS, "smtp_enabled", True),
        patch.object(
            SETTINGS, "alert_recipients", ["ops@example.org", "hq@example.org"]
        ),
        patch.object(inventory_checker.aiosmtplib, "send", new=send),
    ):
        await check_inventory_task()

    assert send.await_count == 2
    assert send.await_args_list[1].kwargs["recipients"] == ["hq@example.org"]


async def test_send_failure_returns_false() -> None:
    with (
        patch.object(SETTINGS, "smtp_enabled", True),
        patch.object(
            inventory_checker.aiosmtplib,
            "send",
            new=AsyncMock(side_effect=OSError("connection refused")),
        ),
    ):
        assert await send_email_notification("s", "b", "a@b.org") is False
