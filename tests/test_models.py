"""
Tests for WeeklyKeeper

Test strategy:
1. Unit tests for the pure engine (dates, categorization, settlement)
2. Store / container / migration tests on in-memory state
3. Service tests with mocked HTTP sessions (no real network calls)
4. Session flow tests with an injected clock and in-memory storage
"""

import pytest
from datetime import datetime

from weekly_keeper.models import (
    SCHEMA_VERSION,
    AppState,
    Category,
    Expense,
    ShiftMode,
    ValidationIssue,
    ValidationResult,
    WeekData,
    WeekDefaults,
)


class TestExpenseModel:
    """Tests for the Expense model."""

    def test_create_derives_date_key_from_logged_time(self):
        """The date key is the local calendar date of the logged instant."""
        logged_at = datetime(2024, 3, 5, 23, 30)
        expense = Expense.create(
            amount=18.5,
            category=Category.LUNCH,
            logged_at=logged_at,
            note="  noodles  ",
        )
        assert expense.date_key == "2024-03-05"
        assert expense.logged_at == logged_at
        assert expense.note == "noodles"
        assert expense.id

    def test_create_generates_unique_ids(self):
        """Test that every created expense gets its own id."""
        logged_at = datetime(2024, 3, 5, 8, 0)
        a = Expense.create(amount=1, category=Category.OTHER, logged_at=logged_at)
        b = Expense.create(amount=1, category=Category.OTHER, logged_at=logged_at)
        assert a.id != b.id

    def test_expense_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Expense(amount=-1, timestamp=0, date_key="2024-03-05")

    def test_expense_is_immutable(self):
        """Test that an expense cannot be edited in place."""
        expense = Expense(amount=10, timestamp=0, date_key="2024-03-05")
        with pytest.raises(ValueError):
            expense.amount = 20

    def test_expense_date_key_is_frozen_at_creation(self):
        """Loading an expense never recomputes dateStr from the timestamp."""
        expense = Expense.model_validate({
            "id": "x",
            "amount": 5,
            "category": "Dinner",
            "timestamp": int(datetime(2024, 3, 6, 1, 0).timestamp() * 1000),
            "dateStr": "2024-03-05",
        })
        assert expense.date_key == "2024-03-05"

    def test_expense_wire_format_uses_camel_case(self):
        """Test the camelCase wire format of an expense."""
        expense = Expense(id="e1", amount=12, category=Category.BREAKFAST,
                          timestamp=1000, date_key="2024-03-05")
        dumped = expense.model_dump(mode="json", by_alias=True)
        assert dumped == {
            "id": "e1",
            "amount": 12.0,
            "category": "Breakfast",
            "note": None,
            "timestamp": 1000,
            "dateStr": "2024-03-05",
        }


class TestWeekModels:
    """Tests for WeekData and WeekDefaults."""

    def test_budget_is_derived_from_eligible_days(self):
        """Test that the budget counts flagged days only."""
        week = WeekData(
            week_start_date="2024-03-04",
            daily_subsidy=28,
            work_days={"2024-03-04": True, "2024-03-05": True, "2024-03-10": False},
        )
        assert week.eligible_day_count == 2
        assert week.budget == 56

    def test_budget_is_serialized_and_ignored_on_input(self):
        """Test that a stored budget is recomputed on load."""
        week = WeekData(week_start_date="2024-03-04", daily_subsidy=10,
                        work_days={"2024-03-04": True})
        dumped = week.model_dump(mode="json", by_alias=True)
        assert dumped["budget"] == 10
        dumped["budget"] = 999
        assert WeekData.model_validate(dumped).budget == 10

    def test_find_expense(self):
        """Test lookup of an expense by id."""
        expense = Expense(id="a", amount=1, timestamp=0, date_key="2024-03-04")
        week = WeekData(week_start_date="2024-03-04", expenses=[expense])
        assert week.find_expense("a") is expense
        assert week.find_expense("missing") is None

    def test_week_defaults_reject_negative_values(self):
        """Test that week defaults must be non-negative."""
        with pytest.raises(ValueError):
            WeekDefaults(daily_subsidy=-1)


class TestAppStateModel:
    """Tests for AppState."""

    def test_defaults(self):
        """Test default values."""
        state = AppState()
        assert state.schema_version == SCHEMA_VERSION
        assert state.global_daily_subsidy_default == 28
        assert state.global_hourly_rate_default == 0
        assert state.global_shift_default == ShiftMode.DAY
        assert state.weeks == {}

    def test_defaults_template(self):
        """Test the template used for new weeks."""
        state = AppState(global_daily_subsidy_default=30,
                         global_hourly_rate_default=25,
                         global_shift_default=ShiftMode.NIGHT)
        assert state.defaults == WeekDefaults(
            daily_subsidy=30, hourly_rate=25, shift_mode=ShiftMode.NIGHT
        )

    def test_wire_keys(self):
        """Test the top-level wire keys."""
        dumped = AppState().model_dump(mode="json", by_alias=True)
        assert set(dumped) == {
            "schemaVersion",
            "globalDailySubsidyDefault",
            "globalHourlyRateDefault",
            "globalShiftDefault",
            "weeks",
        }


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test that an error-level issue makes the result invalid."""
        result = ValidationResult(issues=[
            ValidationIssue(field="amount", issue_type="missing", message="amount is required"),
        ])
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings alone keep the result valid."""
        result = ValidationResult(issues=[
            ValidationIssue(field="hours", issue_type="unusual",
                            message="Long day", severity="warning"),
        ])
        assert result.has_errors is False
        assert result.warnings == ["Long day"]


class TestCategories:
    """Tests for the category and shift enums."""

    def test_category_values(self):
        """Test the category wire values."""
        assert [c.value for c in Category] == ["Breakfast", "Lunch", "Dinner", "Other"]

    def test_shift_values(self):
        """Test the shift wire values."""
        assert ShiftMode("day") is ShiftMode.DAY
        assert ShiftMode("night") is ShiftMode.NIGHT


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
