"""Shared fixtures: a fixed clock and small builders for weeks and expenses."""

from datetime import datetime
from itertools import count

import pytest

from weekly_keeper.engine.dates import week_date_keys
from weekly_keeper.models import Category, Expense, ShiftMode, WeekData


# Tuesday; its week starts Monday 2024-03-04 and ends Sunday 2024-03-10.
FIXED_NOW = datetime(2024, 3, 5, 12, 30)
WEEK_KEY = "2024-03-04"
MON, TUE, WED, THU, FRI, SAT, SUN = week_date_keys(WEEK_KEY)

_ids = count(1)


def make_expense(date_key: str, amount: float, category: Category = Category.OTHER) -> Expense:
    return Expense(
        id=f"exp-{next(_ids)}",
        amount=amount,
        category=category,
        timestamp=int(datetime.fromisoformat(f"{date_key}T12:00").timestamp() * 1000),
        date_key=date_key,
    )


def make_week(
    week_key: str = WEEK_KEY,
    daily_subsidy: float = 28.0,
    hourly_rate: float = 30.0,
    work_days=None,
    daily_hours=None,
    spends=None,
    shift_mode: ShiftMode = ShiftMode.DAY,
) -> WeekData:
    """
    A week with Monday..Saturday flagged unless work_days is given.
    `spends` maps date key -> amount (one expense) or list of amounts.
    """
    if work_days is None:
        work_days = {key: True for key in week_date_keys(week_key)[:6]}
    expenses = []
    for date_key, amounts in (spends or {}).items():
        if not isinstance(amounts, (list, tuple)):
            amounts = [amounts]
        expenses.extend(make_expense(date_key, a) for a in amounts)
    return WeekData(
        week_start_date=week_key,
        daily_subsidy=daily_subsidy,
        hourly_rate=hourly_rate,
        shift_mode=shift_mode,
        work_days=work_days,
        daily_hours=daily_hours or {},
        expenses=expenses,
    )


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
