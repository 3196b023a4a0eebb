"""
Week Record Store

Owns the map of week key -> WeekData: lazy creation, hours, work-day
flags, expenses and per-week settings.

The store does not validate values; callers validate user input first.
Weeks are never deleted implicitly. Empty ("ghost") weeks are kept and
only hidden by the read side.
"""

from typing import Optional

import structlog

from weekly_keeper.engine.dates import default_work_day_keys
from weekly_keeper.engine.reports import is_ghost_week
from weekly_keeper.errors import WeeklyKeeperError
from weekly_keeper.models.expense import Expense, ShiftMode
from weekly_keeper.models.week import WeekData, WeekDefaults


logger = structlog.get_logger(__name__)

class UnknownWeekError(WeeklyKeeperError, KeyError):
    """A mutation targeted a week that was never created."""
    pass


class WeekRecordStore:
    """
    Mutations on the week map.

    Wraps the mapping it is given (normally AppState.weeks) without
    copying it, so changes are visible through the owning state.
    """

    def __init__(self, weeks: dict[str, WeekData]):
        self._weeks = weeks

    def __contains__(self, week_key: str) -> bool:
        return week_key in self._weeks

    def __len__(self) -> int:
        return len(self._weeks)

    def keys(self) -> list[str]:
        return sorted(self._weeks)

    def get_week(self, week_key: str) -> Optional[WeekData]:
        return self._weeks.get(week_key)

    def get_or_create_week(self, week_key: str, defaults: WeekDefaults) -> WeekData:
        """
        Return the week, creating it from the defaults on first access.

        An existing week is returned unchanged, whatever the defaults say.
        """
        week = self._weeks.get(week_key)
        if week is not None:
            return week

        eligible = default_work_day_keys(week_key)
        week = WeekData(
            week_start_date=week_key,
            daily_subsidy=defaults.daily_subsidy,
            hourly_rate=defaults.hourly_rate,
            shift_mode=defaults.shift_mode,
            work_days={key: True for key in eligible},
        )
        self._weeks[week_key] = week
        logger.info(
            "week_created",
            week=week_key,
            daily_subsidy=defaults.daily_subsidy,
            hourly_rate=defaults.hourly_rate,
            shift_mode=defaults.shift_mode.value,
        )
        return week

    def _require(self, week_key: str) -> WeekData:
        week = self._weeks.get(week_key)
        if week is None:
            raise UnknownWeekError(week_key)
        return week

    def set_hours_worked(self, week_key: str, date_key: str, hours: float) -> None:
        self._require(week_key).daily_hours[date_key] = hours

    def set_work_day_flag(self, week_key: str, date_key: str, is_eligible: bool) -> None:
        self._require(week_key).work_days[date_key] = bool(is_eligible)

    def add_expense(self, week_key: str, expense: Expense) -> None:
        """Prepend, so the list reads newest first."""
        self._require(week_key).expenses.insert(0, expense)

    def delete_expense(self, week_key: str, expense_id: str) -> bool:
        """Remove an expense by id. Returns False (and does nothing) if absent."""
        week = self._weeks.get(week_key)
        if week is None:
            return False
        remaining = [e for e in week.expenses if e.id != expense_id]
        if len(remaining) == len(week.expenses):
            return False
        week.expenses = remaining
        return True

    def update_week_settings(
        self,
        week_key: str,
        daily_subsidy: float,
        hourly_rate: float,
        shift_mode: ShiftMode,
    ) -> None:
        """Overwrite this week's settings only; other weeks keep theirs."""
        week = self._require(week_key)
        week.daily_subsidy = daily_subsidy
        week.hourly_rate = hourly_rate
        week.shift_mode = ShiftMode(shift_mode)

    def visible_weeks(self) -> list[WeekData]:
        """Non-ghost weeks, newest first."""
        return [
            self._weeks[key]
            for key in sorted(self._weeks, reverse=True)
            if not is_ghost_week(self._weeks[key])
        ]

    def prune_ghost_weeks(self, before_week_key: str) -> list[str]:
        """
        Delete ghost weeks that start before the given week key.

        Never called implicitly; retention is the caller's decision.
        Returns the removed keys.
        """
        removed = [
            key for key, week in self._weeks.items()
            if key < before_week_key and is_ghost_week(week)
        ]
        for key in removed:
            del self._weeks[key]
        if removed:
            logger.info("ghost_weeks_pruned", count=len(removed), before=before_week_key)
        return sorted(removed)
