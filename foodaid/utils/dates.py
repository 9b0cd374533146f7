"""Date utilities."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Current UTC calendar date."""
    return utc_now().date()


def calculate_days_until(target: date) -> int:
    """Calculate the number of days from today until a date.

    Args:
        target (date): The date to calculate against.

    Returns:
        int: Days until the date, negative once it has passed.
    """
    return (target - utc_today()).days


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from the store.

    Args:
        value (datetime): The datetime to normalize.

    Returns:
        datetime: An aware datetime.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
