"""
Settlement Engine

Turns a week's logged hours and expenses into wage, subsidy, overspend
and net-income figures.

DESIGN DECISION: Every function here is pure. It reads a WeekData and
returns numbers; it never mutates the week. Figures are accumulated at
full float precision and only rounded by round_money() at display time.

POLICIES (see SettlementPolicy):
- POOLED: a day's subsidy is granted only if the day is flagged as a
  work day. Overspend is netted across the whole week, so a day that
  overspends is absorbed by days that underspend.
- STRICT_DAILY: same entitlement, but every day is settled on its own.
- SIX_DAY_SPLIT: the legacy weekly budget split evenly over Monday to
  Saturday, nothing on Sunday, settled per day. Work-day flags are ignored.
- FLAT_WEEKLY: the legacy weekly budget checked once against the week's
  total spend. Work-day flags are ignored.

The legacy weekly budget is daily_subsidy x 6; that is how persisted
"budget" totals were converted into a daily subsidy on migration.

Unset, NaN, infinite or negative hours, rates, subsidies and amounts
are treated as zero.
"""

import math
from collections import defaultdict
from typing import Any, Optional

from weekly_keeper.engine.dates import is_settlement_day, parse_date_key, week_date_keys
from weekly_keeper.models.expense import Category
from weekly_keeper.models.settlement import DaySettlement, SettlementPolicy, WeekSettlement
from weekly_keeper.models.week import WeekData


LEGACY_WORK_DAYS_PER_WEEK = 6


def non_negative(value: Any) -> float:
    """Coerce to a usable non-negative number, else 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def round_money(value: float, places: int = 1) -> float:
    """Presentation rounding. Never use inside accumulation."""
    return round(value, places)


# =============================================================================
# WAGES
# =============================================================================

def hours_on(week: WeekData, date_key: str) -> float:
    return non_negative(week.daily_hours.get(date_key))


def wage(week: WeekData, date_key: str) -> float:
    """Hours worked on the day times the week's hourly rate."""
    return hours_on(week, date_key) * non_negative(week.hourly_rate)


def weekly_hours(week: WeekData) -> float:
    return sum(hours_on(week, key) for key in week.daily_hours)


def weekly_wage(week: WeekData) -> float:
    return sum(wage(week, key) for key in week.daily_hours)


# =============================================================================
# SPEND
# =============================================================================

def daily_spend(week: WeekData, date_key: str) -> float:
    return sum(non_negative(e.amount) for e in week.expenses if e.date_key == date_key)


def weekly_spend(week: WeekData) -> float:
    return sum(non_negative(e.amount) for e in week.expenses)


def spend_by_day(week: WeekData) -> dict[str, float]:
    """Date key -> total spend, for days with at least one expense."""
    totals: dict[str, float] = defaultdict(float)
    for expense in week.expenses:
        totals[expense.date_key] += non_negative(expense.amount)
    return dict(totals)


def category_totals(
    week: WeekData,
    date_key: Optional[str] = None,
) -> dict[Category, float]:
    """Spend per category for one day, or the whole week if date_key is None."""
    totals: dict[Category, float] = {}
    for expense in week.expenses:
        if date_key is not None and expense.date_key != date_key:
            continue
        totals[expense.category] = totals.get(expense.category, 0.0) + non_negative(expense.amount)
    return totals


def day_keys(week: WeekData) -> list[str]:
    """Every date key the week knows about, in calendar order."""
    keys = set(week_date_keys(week.week_start_date))
    keys.update(week.daily_hours)
    keys.update(week.work_days)
    keys.update(e.date_key for e in week.expenses)
    return sorted(keys)


# =============================================================================
# SUBSIDY
# =============================================================================

def is_work_day(week: WeekData, date_key: str) -> bool:
    return bool(week.work_days.get(date_key, False))


def subsidy_entitlement(
    week: WeekData,
    date_key: str,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> float:
    """Subsidy granted for one day under the policy."""
    daily = non_negative(week.daily_subsidy)
    if policy in (SettlementPolicy.POOLED, SettlementPolicy.STRICT_DAILY):
        return daily if is_work_day(week, date_key) else 0.0

    # Legacy policies: Monday..Saturday of this week, Sunday gets nothing.
    if date_key not in week_date_keys(week.week_start_date):
        return 0.0
    if is_settlement_day(parse_date_key(date_key)):
        return 0.0
    return daily


def weekly_budget(
    week: WeekData,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> float:
    """Total subsidy available for the week."""
    daily = non_negative(week.daily_subsidy)
    if policy in (SettlementPolicy.POOLED, SettlementPolicy.STRICT_DAILY):
        return daily * week.eligible_day_count
    return daily * LEGACY_WORK_DAYS_PER_WEEK


# =============================================================================
# DEDUCTION
# =============================================================================

def pooled_excess(
    week: WeekData,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> float:
    """Spend above the week's cumulative budget."""
    return max(0.0, weekly_spend(week) - weekly_budget(week, policy))


def strict_daily_excess(
    week: WeekData,
    policy: SettlementPolicy = SettlementPolicy.STRICT_DAILY,
) -> float:
    """Sum of every day's spend above that day's own entitlement."""
    return sum(
        max(0.0, spent - subsidy_entitlement(week, key, policy))
        for key, spent in spend_by_day(week).items()
    )


def week_excess(
    week: WeekData,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> float:
    """The amount deducted from the week's wage under the policy."""
    if policy.is_pooled:
        return pooled_excess(week, policy)
    return strict_daily_excess(week, policy)


def day_deduction(
    week: WeekData,
    date_key: str,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> float:
    """
    The part of the week's deduction attributed to one day.

    Pooled policies attribute the marginal overflow: how much the
    cumulative overflow grows when this day's spend is added to the
    spend of all earlier days (date keys compare correctly as strings).
    Summed over the week this telescopes to exactly week_excess().
    """
    spent_today = daily_spend(week, date_key)
    if not policy.is_pooled:
        return max(0.0, spent_today - subsidy_entitlement(week, date_key, policy))

    budget = weekly_budget(week, policy)
    prior_spend = sum(
        non_negative(e.amount) for e in week.expenses if e.date_key < date_key
    )
    prior_overflow = max(0.0, prior_spend - budget)
    overflow_through_day = max(0.0, prior_spend + spent_today - budget)
    return overflow_through_day - prior_overflow


def day_net_income(
    week: WeekData,
    date_key: str,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> float:
    return wage(week, date_key) - day_deduction(week, date_key, policy)


# =============================================================================
# SETTLEMENTS
# =============================================================================

def compute_settlement(
    week: WeekData,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> WeekSettlement:
    """Week totals under one policy."""
    wage_total = weekly_wage(week)
    excess = week_excess(week, policy)
    return WeekSettlement(
        week_start_date=week.week_start_date,
        policy=policy,
        hours=weekly_hours(week),
        wage=wage_total,
        budget=weekly_budget(week, policy),
        spend=weekly_spend(week),
        excess=excess,
        net_income=wage_total - excess,
    )


def settle_day(
    week: WeekData,
    date_key: str,
    policy: SettlementPolicy = SettlementPolicy.POOLED,
) -> DaySettlement:
    """One day's detail figures under one policy."""
    day_wage = wage(week, date_key)
    deduction = day_deduction(week, date_key, policy)
    return DaySettlement(
        date_key=date_key,
        policy=policy,
        hours=hours_on(week, date_key),
        wage=day_wage,
        is_work_day=is_work_day(week, date_key),
        entitlement=subsidy_entitlement(week, date_key, policy),
        spend=daily_spend(week, date_key),
        deduction=deduction,
        net_income=day_wage - deduction,
        category_totals=category_totals(week, date_key),
    )
