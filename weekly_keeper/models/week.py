"""
Week aggregate

One WeekData per week, keyed by the date key of its Monday. Hours,
work-day flags and expenses are all keyed by date key (YYYY-MM-DD).

DESIGN DECISION: The numeric fields carry no range constraints.
Persisted data is trusted on load and the settlement engine clamps
unusable values to zero; user input is validated before it gets here.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from weekly_keeper.models.expense import Expense, ShiftMode


class WeekDefaults(BaseModel):
    """
    Template copied into a week when it is created.

    Editing the global defaults later never reaches back into weeks
    that already exist.
    """
    model_config = ConfigDict(frozen=True)

    daily_subsidy: float = Field(default=28.0, ge=0)
    hourly_rate: float = Field(default=0.0, ge=0)
    shift_mode: ShiftMode = ShiftMode.DAY


class WeekData(BaseModel):
    """A week of logged hours, work-day flags and expenses."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    week_start_date: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Monday date key; equals the key in AppState.weeks"
    )
    daily_subsidy: float = Field(
        default=0.0,
        description="Subsidy granted per eligible work day"
    )
    work_days: dict[str, bool] = Field(
        default_factory=dict,
        description="Date key -> subsidy eligible"
    )
    hourly_rate: float = Field(
        default=0.0,
        description="Wage per hour for this week"
    )
    shift_mode: ShiftMode = ShiftMode.DAY
    daily_hours: dict[str, float] = Field(
        default_factory=dict,
        description="Date key -> hours worked"
    )
    expenses: list[Expense] = Field(
        default_factory=list,
        description="Expenses, newest first"
    )

    @computed_field
    @property
    def budget(self) -> float:
        """Weekly subsidy pool, kept on the wire for older readers."""
        return self.daily_subsidy * self.eligible_day_count

    @property
    def eligible_day_count(self) -> int:
        return sum(1 for flag in self.work_days.values() if flag)

    def find_expense(self, expense_id: str):
        """Return the expense with this id, or None."""
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None
