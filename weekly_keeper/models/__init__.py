"""
Data Models Package

This package contains all Pydantic models used in WeeklyKeeper.
Persisted models (Expense, WeekData, AppState) use camelCase aliases so
that model_dump(by_alias=True) produces the shared wire format.
"""

from weekly_keeper.models.expense import (
    LEGACY_CATEGORY_LABELS,
    Category,
    Expense,
    ShiftMode,
)
from weekly_keeper.models.week import WeekData, WeekDefaults
from weekly_keeper.models.state import SCHEMA_VERSION, AppState
from weekly_keeper.models.settlement import (
    DaySettlement,
    HistoryWeek,
    MonthSummary,
    SettlementPolicy,
    WeekSettlement,
)
from weekly_keeper.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Persisted models
    "AppState",
    "Category",
    "Expense",
    "LEGACY_CATEGORY_LABELS",
    "SCHEMA_VERSION",
    "ShiftMode",
    "WeekData",
    "WeekDefaults",
    # Derived read models
    "DaySettlement",
    "HistoryWeek",
    "MonthSummary",
    "SettlementPolicy",
    "WeekSettlement",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
