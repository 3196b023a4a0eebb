"""
Engine Package

Pure domain logic: calendar keys, expense categorization, settlement
math and read-side reports. Nothing in here performs I/O or mutates
its inputs.
"""

from weekly_keeper.engine.categorizer import (
    categorize,
    hour_of_day,
    parse_clock_time,
    resolve_category,
)
from weekly_keeper.engine.dates import (
    WeekAnchor,
    date_key_of,
    is_settlement_day,
    month_key_of,
    parse_date_key,
    week_date_keys,
    week_range_label,
    week_start_key_of,
)
from weekly_keeper.engine.reports import (
    active_dates,
    history,
    is_ghost_week,
    monthly_summaries,
)
from weekly_keeper.engine.settlement import (
    category_totals,
    compute_settlement,
    daily_spend,
    day_deduction,
    day_net_income,
    pooled_excess,
    round_money,
    settle_day,
    strict_daily_excess,
    subsidy_entitlement,
    wage,
    week_excess,
    weekly_budget,
    weekly_spend,
    weekly_wage,
)

__all__ = [
    # Calendar
    "WeekAnchor",
    "date_key_of",
    "is_settlement_day",
    "month_key_of",
    "parse_date_key",
    "week_date_keys",
    "week_range_label",
    "week_start_key_of",
    # Categorization
    "categorize",
    "hour_of_day",
    "parse_clock_time",
    "resolve_category",
    # Settlement
    "category_totals",
    "compute_settlement",
    "daily_spend",
    "day_deduction",
    "day_net_income",
    "pooled_excess",
    "round_money",
    "settle_day",
    "strict_daily_excess",
    "subsidy_entitlement",
    "wage",
    "week_excess",
    "weekly_budget",
    "weekly_spend",
    "weekly_wage",
    # Reports
    "active_dates",
    "history",
    "is_ghost_week",
    "monthly_summaries",
]
