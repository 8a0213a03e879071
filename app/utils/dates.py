"""Calendar-day helpers shared by the streak engine and the services."""
from datetime import date, datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo

from app.config import settings


DateLike = Union[date, datetime, str]


def today_in(tz_name: str) -> date:
    """
    Return the current calendar date in the given IANA time zone.

    Examples:
        >>> isinstance(today_in("UTC"), date)
        True
    """
    return datetime.now(ZoneInfo(tz_name)).date()


def current_date() -> date:
    """Return "today" according to the configured application time zone."""
    return today_in(settings.timezone)


def to_calendar_date(value: DateLike) -> date:
    """
    Reduce a date-like value to its calendar day.

    Accepts ``date``, ``datetime`` (time of day is dropped) and ISO-8601
    strings. Strings may be plain dates or full timestamps; only the part
    before ``T`` is used.

    Args:
        value: Date, datetime or ISO-8601 string

    Returns:
        Calendar date

    Raises:
        ValueError: If a string is not a valid ISO-8601 date

    Examples:
        >>> to_calendar_date("2025-01-15")
        datetime.date(2025, 1, 15)
        >>> to_calendar_date("2025-01-15T22:10:00.000Z")
        datetime.date(2025, 1, 15)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip().split("T")[0])
    raise ValueError(f"Unsupported date value: {value!r}")


def to_datetime(value: Optional[date]) -> Optional[datetime]:
    """Store a calendar date as a midnight datetime (BSON has no date type)."""
    if value is None:
        return None
    return datetime.combine(value, datetime.min.time())


def from_datetime(value: Optional[DateLike]) -> Optional[date]:
    """Inverse of ``to_datetime``; tolerates values already stored as dates."""
    if value is None:
        return None
    return to_calendar_date(value)


def format_relative_date(target: DateLike, today: Optional[date] = None) -> str:
    """
    Describe a date relative to today.

    Examples:
        >>> format_relative_date(date(2025, 1, 22), today=date(2025, 1, 21))
        'Tomorrow'
        >>> format_relative_date(date(2025, 1, 16), today=date(2025, 1, 21))
        '5 days ago'
    """
    today = today or current_date()
    diff = (to_calendar_date(target) - today).days

    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if diff == -1:
        return "Yesterday"
    if diff > 0:
        return f"In {diff} days"
    return f"{abs(diff)} days ago"
