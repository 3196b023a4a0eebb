"""
Expense model

An expense is a single logged meal or purchase. It is attributed to a
calendar date once, when it is created, and that attribution is frozen:
later changes to how dates are derived never move an existing expense.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Expense categories.

    Meals are named relative to the shift, not the wall clock: on a night
    shift "Breakfast" is the meal eaten at the start of the shift.
    """
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    OTHER = "Other"


# Labels written by older releases of the app.
LEGACY_CATEGORY_LABELS = {
    "早餐": Category.BREAKFAST,
    "中餐": Category.LUNCH,
    "晚餐": Category.DINNER,
    "其他": Category.OTHER,
}


class ShiftMode(str, Enum):
    """Which shift a week is worked on; drives automatic categorization."""
    DAY = "day"
    NIGHT = "night"


# =============================================================================
# EXPENSE
# =============================================================================

class Expense(BaseModel):
    """
    A logged expense.

    Immutable except for deletion; owned by exactly one week's
    expense list.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        min_length=1,
        description="Opaque unique identifier"
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Amount spent"
    )
    category: Category = Field(
        default=Category.OTHER,
        description="Meal category"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free text note"
    )
    timestamp: int = Field(
        ...,
        description="Logged instant in Unix epoch milliseconds"
    )
    date_key: str = Field(
        ...,
        alias="dateStr",
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Calendar date (YYYY-MM-DD) the expense is attributed to"
    )

    @classmethod
    def create(
        cls,
        amount: float,
        category: Category,
        logged_at: datetime,
        note: Optional[str] = None,
        expense_id: Optional[str] = None,
    ) -> "Expense":
        """
        Create an expense logged at a local wall-clock instant.

        The date key is derived from logged_at here and never again.
        """
        fields = {
            "amount": amount,
            "category": category,
            "note": note or None,
            "timestamp": int(round(logged_at.timestamp() * 1000)),
            "date_key": logged_at.date().isoformat(),
        }
        if expense_id is not None:
            fields["id"] = expense_id
        return cls(**fields)

    @property
    def logged_at(self) -> datetime:
        """The logged instant as a local datetime."""
        return datetime.fromtimestamp(self.timestamp / 1000)
