"""
History and monthly reports

Read-side views over the whole state: the history listing (weeks that
hold real data, newest first) and per-month roll-ups. Weeks are filed
under the month of their Monday, so a week spanning two months counts
once, in the month it starts.
"""

from weekly_keeper.engine.dates import default_work_day_keys, month_key_of, week_range_label
from weekly_keeper.engine.settlement import non_negative, compute_settlement
from weekly_keeper.models.settlement import (
    HistoryWeek,
    MonthSummary,
    SettlementPolicy,
)
from weekly_keeper.models.state import AppState
from weekly_keeper.models.week import WeekData


def is_ghost_week(week: WeekData) -> bool:
    """
    A week with nothing in it: no expenses, no positive hours and no work
    day flag set by the user. Flags that still match the Monday..Saturday
    seeding a new week gets count as unset, so a week that was only
    navigated to is a ghost. Ghost weeks stay in storage; listings skip them.
    """
    if week.expenses:
        return False
    if any(non_negative(hours) > 0 for hours in week.daily_hours.values()):
        return False
    flagged = {key for key, eligible in week.work_days.items() if eligible}
    return not flagged or flagged == set(default_work_day_keys(week.week_start_date))


def active_dates(week: WeekData) -> list[str]:
    """Dates with hours or expenses logged, newest first."""
    dates = {key for key, hours in week.daily_hours.items() if non_negative(hours) > 0}
    dates.update(e.date_key for e in week.expenses)
    return sorted(dates, reverse=True)


def visible_week_keys(state: AppState) -> list[str]:
    """Keys of non-ghost weeks, newest first."""
    return sorted(
        (key for key, week in state.weeks.items() if not is_ghost_week(week)),
        reverse=True,
    )


def history(
    state: AppState,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> list[HistoryWeek]:
    """The history listing: every non-ghost week with its settlement."""
    return [
        HistoryWeek(
            week_start_date=key,
            range_label=week_range_label(key),
            settlement=compute_settlement(state.weeks[key], policy),
            active_dates=active_dates(state.weeks[key]),
        )
        for key in visible_week_keys(state)
    ]


def monthly_summaries(
    state: AppState,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> list[MonthSummary]:
    """Per-month totals of the non-ghost weeks, newest month first."""
    months: dict[str, list[str]] = {}
    for key in visible_week_keys(state):
        months.setdefault(month_key_of(key), []).append(key)

    summaries = []
    for month in sorted(months, reverse=True):
        settlements = [compute_settlement(state.weeks[k], policy) for k in months[month]]
        summaries.append(MonthSummary(
            month=month,
            week_keys=months[month],
            hours=sum(s.hours for s in settlements),
            wage=sum(s.wage for s in settlements),
            spend=sum(s.spend for s in settlements),
            excess=sum(s.excess for s in settlements),
            net_income=sum(s.net_income for s in settlements),
        ))
    return summaries
