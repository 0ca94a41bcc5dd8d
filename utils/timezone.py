"""UTC-everywhere time handling, plus the calendar-date helpers billing needs."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def today_utc() -> date:
    """Current calendar date in UTC."""
    return now_utc().date()


def today_in(tz_name: str) -> date:
    """
    Current calendar date in the given timezone.

    Payment dates are calendar dates picked by a person, so "today" has to be
    evaluated on their wall clock rather than in UTC.

    Raises:
        ValueError: If the timezone name is unknown
    """
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {tz_name}")

    return now_utc().astimezone(tz).date()


def assume_utc(dt: datetime) -> datetime:
    """
    Normalize an API timestamp to an aware UTC datetime.

    The billing server sends naive timestamps (no offset); those are UTC.
    Aware timestamps are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_date(value: str | date | datetime) -> date:
    """
    Coerce a payment date to a calendar date.

    Accepts a ``date``, a ``datetime`` (date part kept), a plain
    ``YYYY-MM-DD`` string or a full ISO timestamp string.

    Raises:
        ValueError: If the string is not ISO 8601
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if "T" in value:
        return datetime.fromisoformat(value).date()
    return date.fromisoformat(value)
