"""
Categorization policy

Maps the clock time an expense was logged at to a meal category when
the user did not pick one. Windows are inclusive on both ends.
"""

from datetime import datetime, time
from typing import Optional, Union

from weekly_keeper.models.expense import Category, ShiftMode


def hour_of_day(t: Union[time, datetime]) -> float:
    """Clock time as a real number of hours, e.g. 07:45 -> 7.75."""
    return t.hour + t.minute / 60


def categorize(hour: float, shift_mode: ShiftMode) -> Category:
    """Category for an expense logged at `hour` on the given shift."""
    if shift_mode == ShiftMode.NIGHT:
        # Shift-start meal, mid-shift meal (wraps midnight), shift-end meal.
        if 18.5 <= hour <= 21:
            return Category.BREAKFAST
        if hour >= 23 or hour <= 2:
            return Category.LUNCH
        if 6 <= hour <= 8:
            return Category.DINNER
        return Category.OTHER

    if 7.5 <= hour <= 8.5:
        return Category.BREAKFAST
    if 11 <= hour <= 12:
        return Category.LUNCH
    if 17 <= hour <= 18:
        return Category.DINNER
    return Category.OTHER


def resolve_category(
    explicit: Optional[Category],
    logged_at: Union[time, datetime],
    shift_mode: ShiftMode,
) -> Category:
    """An explicit category always wins; otherwise categorize by time."""
    if explicit is not None:
        return Category(explicit)
    return categorize(hour_of_day(logged_at), shift_mode)


def parse_clock_time(value: str) -> time:
    """
    Parse "HH:MM" (24h).

    Raises:
        ValueError: If the value is not a valid clock time
    """
    try:
        hours_text, minutes_text = value.strip().split(":")
        return time(int(hours_text), int(minutes_text))
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid clock time {value!r}, expected HH:MM") from e
