"""
Settlement read models

These are derived, read-only figures produced by engine.settlement and
engine.reports. They are never persisted; they are recomputed from the
week on demand.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from weekly_keeper.models.expense import Category


class SettlementPolicy(str, Enum):
    """
    How subsidy is granted per day and how overspend reaches wages.

    POOLED is the current policy. The others are kept so data written
    under them can still be read the way it was read at the time.
    """
    # Flagged work days x daily subsidy; overspend netted across the week.
    POOLED = "pooled"
    # Flagged work days x daily subsidy; every day settled on its own.
    STRICT_DAILY = "strict_daily"
    # Weekly budget / 6 on Monday..Saturday, nothing on Sunday; per day.
    SIX_DAY_SPLIT = "six_day_split"
    # Weekly budget checked once against total weekly spend.
    FLAT_WEEKLY = "flat_weekly"

    @property
    def is_pooled(self) -> bool:
        return self in (SettlementPolicy.POOLED, SettlementPolicy.FLAT_WEEKLY)


class WeekSettlement(BaseModel):
    """Week totals under one policy. Full precision; round for display only."""
    model_config = ConfigDict(frozen=True)

    week_start_date: str
    policy: SettlementPolicy
    hours: float = Field(ge=0)
    wage: float = Field(ge=0)
    budget: float = Field(ge=0)
    spend: float = Field(ge=0)
    excess: float = Field(ge=0)
    net_income: float

    @property
    def balance(self) -> float:
        """Subsidy left over (positive) or overspent (negative)."""
        return self.budget - self.spend


class DaySettlement(BaseModel):
    """One day's detail, with its share of the week's deduction."""
    model_config = ConfigDict(frozen=True)

    date_key: str
    policy: SettlementPolicy
    hours: float = Field(ge=0)
    wage: float = Field(ge=0)
    is_work_day: bool
    entitlement: float = Field(ge=0)
    spend: float = Field(ge=0)
    deduction: float = Field(ge=0)
    net_income: float
    category_totals: dict[Category, float] = Field(default_factory=dict)

    @property
    def balance(self) -> float:
        """
        Day surplus (positive) or overspend (negative) against the day's
        own entitlement. Under a pooled policy this feeds the week pool
        and is not deducted directly.
        """
        return self.entitlement - self.spend


class HistoryWeek(BaseModel):
    """A week as listed in the history view."""
    model_config = ConfigDict(frozen=True)

    week_start_date: str
    range_label: str
    settlement: WeekSettlement
    active_dates: list[str] = Field(default_factory=list)


class MonthSummary(BaseModel):
    """Totals of the weeks whose Monday falls in one month."""
    model_config = ConfigDict(frozen=True)

    month: str = Field(pattern=r"^\d{4}-\d{2}$")
    week_keys: list[str] = Field(default_factory=list)
    hours: float = 0.0
    wage: float = 0.0
    spend: float = 0.0
    excess: float = 0.0
    net_income: float = 0.0
