from __future__ import annotations

from datetime import date, datetime
from typing import Union
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_calendar_day(value: DateLike) -> date:
    """Normalize a date, datetime or ISO string to its calendar day.

    The calendar day is the one written in the value itself: a datetime keeps
    its own date regardless of tzinfo, and ``"2025-09-15T00:00:00Z"`` is
    2025-09-15 whatever the local offset.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) < 10:
            raise ValueError(f"Invalid date string: {value!r}")
        return parse_iso_date(text[:10])
    raise TypeError(f"Unsupported date value type: {type(value)!r}")


def format_iso_date(value: DateLike) -> str:
    return to_calendar_day(value).strftime("%Y-%m-%d")


def is_weekend(value: DateLike) -> bool:
    return to_calendar_day(value).weekday() >= 5


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current time in the school's timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(ZoneInfo(tz_name))


def today_local(tz_name: str = DEFAULT_TIMEZONE) -> date:
    return now_local(tz_name).date()
