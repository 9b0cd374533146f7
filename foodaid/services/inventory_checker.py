"""Background service for checking low or expiring stock and alerting."""

import logging
import typing as t
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from foodaid.core.config import SETTINGS
from foodaid.core.database import ASYNC_SESSION_MAKER
from foodaid.core.models import InventoryItem
from foodaid.services.inventory_service import InventoryService

LOGGER = logging.getLogger(__name__)


def _item_info(item: InventoryItem) -> t.Dict[str, t.Any]:
    return {
        "id": item.id,
        "item": item.item,
        "quantity": item.quantity,
        "unit": item.unit,
        "expiration": item.expiration.isoformat(),
    }


async def get_inventory_alerts() -> t.Dict[str, t.Any]:
    """Get all items that are low on stock or close to expiry.

    Returns:
        Dict[str, Any]:
            A dictionary containing the low-stock and near-expiry items.
    """
    async with ASYNC_SESSION_MAKER() as session:
        low_stock, near_expiry = await InventoryService(
            session, SETTINGS.app_id
        ).get_low_stock_and_expiring()

        return {
            "low_stock": [_item_info(item) for item in low_stock],
            "near_expiry": [_item_info(item) for item in near_expiry],
            "checked_at": datetime.now(timezone.utc).isoformat(),
        }


async def send_email_notification(
    subject: str,
    body: str,
    to_email: str,
) -> bool:
    """Send email notification (if SMTP is configured).

    Args:
        subject (str): The email subject.
        body (str): The email body.
        to_email (str): The recipient email address.

    Returns:
        bool: True if email was sent, False otherwise.
    """
    if not SETTINGS.smtp_enabled:
        LOGGER.debug("SMTP not enabled, skipping email notification")
        return False

    try:
        message: MIMEMultipart = MIMEMultipart()
        message["From"] = SETTINGS.smtp_from_email
        message["To"] = to_email
        message["Subject"] = subject
        message.attach(MIMEText(body, "plain"))

        await aiosmtplib.send(
            message,
            hostname=SETTINGS.smtp_host,
            port=SETTINGS.smtp_port,
            sender=(
                SETTINGS.smtp_from_email if SETTINGS.smtp_from_email else None
            ),
            recipients=[to_email],
            username=SETTINGS.smtp_user if SETTINGS.smtp_user else None,
            password=(
                SETTINGS.smtp_password if SETTINGS.smtp_password else None
            ),
            start_tls=SETTINGS.smtp_port == 587,
            use_tls=SETTINGS.smtp_port == 465,
            timeout=10,
        )
        LOGGER.info("Email notification sent to %s", to_email)
        return True

    except Exception:  # pylint: disable=broad-except
        LOGGER.exception("Failed to send email to %s", to_email)
        return False


def format_inventory_report(alerts: t.Dict[str, t.Any]) -> str:
    """Format inventory alerts into a readable report.

    Args:
        alerts (Dict[str, Any]): The inventory alert data.

    Returns:
        str: The formatted inventory report.
    """
    lines: t.List[str] = [
        "=" * 50,
        "FOODAID INVENTORY REPORT",
        f"Generated: {alerts['checked_at']}",
        "=" * 50,
        "",
    ]

    if alerts["low_stock"]:
        lines.append(
            f"LOW STOCK - Fewer than {SETTINGS.low_stock_threshold} units:"
        )
        lines.append("-" * 30)
        for item in alerts["low_stock"]:
            lines.append(
                f"  * {item['item']}: {item['quantity']} {item['unit']}"
            )
        lines.append("")

    if alerts["near_expiry"]:
        lines.append(
            f"NEAR EXPIRY - Within {SETTINGS.near_expiry_days} days:"
        )
        lines.append("-" * 30)
        for item in alerts["near_expiry"]:
            lines.append(
                f"  * {item['item']} (x{item['quantity']}) - "
                f"Expires: {item['expiration']}"
            )
        lines.append("")

    if not alerts["low_stock"] and not alerts["near_expiry"]:
        lines.append("All stock levels and dates are fine.")

    return "\n".join(lines)


async def check_inventory_task() -> None:
    """Background task to check inventory and send alert emails."""
    LOGGER.info("Running inventory check...")

    try:
        alerts: t.Dict[str, t.Any] = await get_inventory_alerts()
        report: str = format_inventory_report(alerts)

        LOGGER.info("\n%s", report)

        if (alerts["low_stock"] or alerts["near_expiry"]) and (
            SETTINGS.smtp_enabled
        ):
            sent: int = 0
            for recipient in SETTINGS.alert_recipients:
                if await send_email_notification(
                    f"{SETTINGS.app_name}: inventory alerts",
                    report,
                    recipient,
                ):
                    sent += 1
            if sent > 0:
                LOGGER.info("Sent %d inventory alert emails", sent)

    except Exception:  # pylint: disable=broad-except
        LOGGER.exception("Error in inventory check task")
