"""
Entry Validation

User input is checked here, before anything touches the state. The store
and the engine accept whatever they are given; this is the only gate.

IMPORTANT: Validation NEVER silently fixes input. A rejected entry
leaves the state exactly as it was and the issues tell the user what
to correct.
"""

import math
import re
from typing import Any, Optional

from weekly_keeper.config.settings import AppSettings
from weekly_keeper.engine.categorizer import parse_clock_time
from weekly_keeper.engine.dates import parse_date_key
from weekly_keeper.errors import WeeklyKeeperError
from weekly_keeper.models.expense import ShiftMode
from weekly_keeper.models.validation import ValidationIssue, ValidationResult


DATE_KEY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class InvalidEntryError(WeeklyKeeperError, ValueError):
    """User input was rejected; carries the validation result."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(issue.message for issue in result.issues)
        super().__init__(messages or "Invalid entry")


class EntryValidator:
    """Validates amounts, hours, rates and clock times typed by the user."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or AppSettings()

    def _check_number(
        self,
        field: str,
        value: Any,
        maximum: Optional[float] = None,
        allow_zero: bool = True,
    ) -> list[ValidationIssue]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return [ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field} is required",
            )]
        if isinstance(value, bool):
            number = math.nan
        else:
            try:
                number = float(value)
            except (TypeError, ValueError):
                number = math.nan
        if math.isnan(number) or math.isinf(number):
            return [ValidationIssue(
                field=field,
                issue_type="not_a_number",
                message=f"{field} must be a number, got {value!r}",
                suggested_fix="Enter digits only, e.g. 12.5",
            )]
        if number < 0 or (number == 0 and not allow_zero):
            return [ValidationIssue(
                field=field,
                issue_type="negative" if number < 0 else "zero",
                message=f"{field} must be greater than {'or equal to ' if allow_zero else ''}zero",
            )]
        if maximum is not None and number > maximum:
            return [ValidationIssue(
                field=field,
                issue_type="too_large",
                message=f"{field} {number:g} is above the limit of {maximum:g}",
                suggested_fix="Check for a misplaced decimal point",
            )]
        return []

    def validate_amount(self, amount: Any) -> ValidationResult:
        """An expense amount: a positive number below the sanity ceiling."""
        return ValidationResult(issues=self._check_number(
            "amount", amount,
            maximum=self._settings.max_expense_amount,
            allow_zero=False,
        ))

    def validate_hours(self, hours: Any) -> ValidationResult:
        """Hours worked in a day: 0 up to max_daily_hours."""
        return ValidationResult(issues=self._check_number(
            "hours", hours, maximum=self._settings.max_daily_hours,
        ))

    def validate_clock_time(self, value: Any) -> ValidationResult:
        try:
            parse_clock_time(value)
        except ValueError as e:
            return ValidationResult(issues=[ValidationIssue(
                field="time",
                issue_type="invalid_format",
                message=str(e),
                suggested_fix="Use 24h HH:MM, e.g. 07:45",
            )])
        return ValidationResult()

    def validate_date_key(self, value: Any) -> ValidationResult:
        """A calendar date as YYYY-MM-DD that exists."""
        try:
            if not isinstance(value, str) or not DATE_KEY_PATTERN.fullmatch(value):
                raise ValueError(f"expected YYYY-MM-DD, got {value!r}")
            parse_date_key(value)
        except ValueError as e:
            return ValidationResult(issues=[ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Invalid date: {e}",
                suggested_fix="Use YYYY-MM-DD, e.g. 2024-03-05",
            )])
        return ValidationResult()

    def validate_settings(
        self,
        daily_subsidy: Any,
        hourly_rate: Any,
        shift_mode: Any,
    ) -> ValidationResult:
        """Subsidy and hourly rate must be non-negative; shift must be known."""
        issues = self._check_number("daily_subsidy", daily_subsidy)
        issues += self._check_number("hourly_rate", hourly_rate)
        try:
            ShiftMode(shift_mode)
        except ValueError:
            issues.append(ValidationIssue(
                field="shift_mode",
                issue_type="invalid_value",
                message=f"shift_mode must be 'day' or 'night', got {shift_mode!r}",
            ))
        return ValidationResult(issues=issues)

    @staticmethod
    def ensure_valid(result: ValidationResult) -> None:
        """
        Raises:
            InvalidEntryError: If the result holds any error-level issue
        """
        if result.has_errors:
            raise InvalidEntryError(result)
