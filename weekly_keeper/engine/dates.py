"""
Time & calendar utility

Pure functions mapping calendar dates to the keys used everywhere else:
a date key is "YYYY-MM-DD" in local calendar time, a week key is the
date key of that week's Monday. Weeks run Monday..Sunday.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Union


DateLike = Union[date, datetime]

SUNDAY = 6  # date.weekday()
DEFAULT_WORK_DAYS_PER_WEEK = 6


class WeekAnchor(str, Enum):
    """Which week a Sunday is filed under."""
    # Sunday closes the week that started six days earlier.
    STABLE = "stable"
    # Sunday is a settlement day that opens the upcoming week.
    # Kept selectable; not the default because it files Sundays under
    # a week that has not started yet.
    SETTLEMENT_ROLL = "settlement_roll"


def _as_date(d: DateLike) -> date:
    if isinstance(d, datetime):
        return d.date()
    return d


def date_key_of(d: DateLike) -> str:
    """Stable YYYY-MM-DD key; time of day is ignored."""
    return _as_date(d).isoformat()


def parse_date_key(key: str) -> date:
    """Inverse of date_key_of."""
    return date.fromisoformat(key)


def is_settlement_day(d: DateLike) -> bool:
    """Sunday is the settlement day."""
    return _as_date(d).weekday() == SUNDAY


def week_start_of(d: DateLike, anchor: WeekAnchor = WeekAnchor.STABLE) -> date:
    """Monday of the week the date is filed under."""
    day = _as_date(d)
    if anchor is WeekAnchor.SETTLEMENT_ROLL and day.weekday() == SUNDAY:
        return day + timedelta(days=1)
    return day - timedelta(days=day.weekday())


def week_start_key_of(d: DateLike, anchor: WeekAnchor = WeekAnchor.STABLE) -> str:
    """Week key (Monday date key) of the week the date is filed under."""
    return date_key_of(week_start_of(d, anchor))


def week_date_keys(week_start_key: str) -> list[str]:
    """The seven date keys Monday..Sunday of a week."""
    monday = parse_date_key(week_start_key)
    return [date_key_of(monday + timedelta(days=i)) for i in range(7)]


def default_work_day_keys(week_start_key: str) -> list[str]:
    """Monday..Saturday: the days a new week starts out subsidy-eligible."""
    return week_date_keys(week_start_key)[:DEFAULT_WORK_DAYS_PER_WEEK]


def month_key_of(date_key: str) -> str:
    """YYYY-MM of a date key."""
    return date_key[:7]


def week_range_label(week_start_key: str) -> str:
    """
    Human label for Monday..Sunday, e.g. "Mar 4 - Mar 10, 2024" or
    "Dec 30, 2024 - Jan 5, 2025" when the week spans a new year.
    """
    start = parse_date_key(week_start_key)
    end = start + timedelta(days=6)
    if start.year == end.year:
        return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"
    return f"{start:%b} {start.day}, {start.year} - {end:%b} {end.day}, {end.year}"


def from_timestamp_ms(ms: int) -> datetime:
    """Epoch milliseconds to a local datetime."""
    return datetime.fromtimestamp(ms / 1000)
