"""
Snapshot migration

migrate() upgrades any persisted snapshot to the current AppState shape.
It runs once, at load or import time, so no read site ever has to check
for missing fields.

VERSIONS:
1 - untagged snapshots written by older releases. Settings were named
    current*Setting, weeks may carry only a weekly "budget" total and no
    dailySubsidy/workDays/hourlyRate/shiftMode/dailyHours, categories may
    be stored as Chinese labels.
2 - current shape (see models.state.AppState), tagged with schemaVersion.

Missing fields are backfilled, never rejected. Only a snapshot without a
"weeks" map, or one whose values cannot be read at all, is refused.
"""

import copy
from collections.abc import Mapping
from typing import Any, Callable

import structlog
from pydantic import ValidationError

from weekly_keeper.engine.dates import date_key_of, from_timestamp_ms, week_date_keys
from weekly_keeper.models.expense import LEGACY_CATEGORY_LABELS, ShiftMode
from weekly_keeper.models.state import SCHEMA_VERSION, AppState
from weekly_keeper.services.storage.interface import ImportFormatError


logger = structlog.get_logger(__name__)

DEFAULT_DAILY_SUBSIDY = 28.0
LEGACY_BUDGET_DAYS = 6


def _first_present(data: Mapping, *names: str) -> Any:
    for name in names:
        if data.get(name) is not None:
            return data[name]
    return None


def _legacy_daily_subsidy(budget: Any) -> float:
    """A legacy weekly budget total covered six working days."""
    if budget:
        return budget / LEGACY_BUDGET_DAYS
    return DEFAULT_DAILY_SUBSIDY


def _upgrade_expense(expense: dict[str, Any]) -> dict[str, Any]:
    category = expense.get("category")
    if category in LEGACY_CATEGORY_LABELS:
        expense["category"] = LEGACY_CATEGORY_LABELS[category].value
    if not expense.get("dateStr") and expense.get("timestamp") is not None:
        expense["dateStr"] = date_key_of(from_timestamp_ms(expense["timestamp"]))
    return expense


def _upgrade_week(week_key: str, week: dict[str, Any]) -> dict[str, Any]:
    week.setdefault("weekStartDate", week_key)
    if week.get("hourlyRate") is None:
        week["hourlyRate"] = 0
    if week.get("dailyHours") is None:
        week["dailyHours"] = {}
    if week.get("shiftMode") is None:
        week["shiftMode"] = ShiftMode.DAY.value
    if week.get("dailySubsidy") is None:
        week["dailySubsidy"] = _legacy_daily_subsidy(week.get("budget"))
    if week.get("workDays") is None:
        eligible = week_date_keys(week["weekStartDate"])[:LEGACY_BUDGET_DAYS]
        week["workDays"] = {key: True for key in eligible}
    week["expenses"] = [_upgrade_expense(dict(e)) for e in week.get("expenses") or []]
    return week


def _upgrade_v1_to_v2(data: dict[str, Any]) -> dict[str, Any]:
    subsidy = _first_present(data, "globalDailySubsidyDefault", "currentDailySubsidySetting")
    if subsidy is None:
        subsidy = _legacy_daily_subsidy(data.get("currentBudgetSetting"))
    rate = _first_present(data, "globalHourlyRateDefault", "currentHourlyRateSetting")
    shift = _first_present(data, "globalShiftDefault", "currentShiftSetting")

    upgraded = {
        "globalDailySubsidyDefault": subsidy,
        "globalHourlyRateDefault": rate if rate is not None else 0,
        "globalShiftDefault": shift if shift is not None else ShiftMode.DAY.value,
        "weeks": {
            key: _upgrade_week(key, dict(week))
            for key, week in (data.get("weeks") or {}).items()
        },
    }
    return upgraded


# from_version -> step producing from_version + 1
_UPGRADES: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _upgrade_v1_to_v2,
}


def schema_version_of(raw: Mapping) -> int:
    version = raw.get("schemaVersion")
    return version if isinstance(version, int) and version >= 1 else 1


def migrate(raw: Any) -> AppState:
    """
    Upgrade a persisted or imported snapshot to the current AppState.

    The input is not modified.

    Raises:
        ImportFormatError: If the snapshot has no "weeks" map or its
            contents cannot be read as weeks and expenses
    """
    if not isinstance(raw, Mapping) or not isinstance(raw.get("weeks"), Mapping):
        raise ImportFormatError("Snapshot has no 'weeks' map")

    data = copy.deepcopy(dict(raw))
    version = schema_version_of(data)
    if version > SCHEMA_VERSION:
        logger.warning(
            "snapshot_from_newer_release",
            version=version,
            supported=SCHEMA_VERSION,
        )
    try:
        while version < SCHEMA_VERSION:
            data = _UPGRADES[version](data)
            version += 1
            logger.info("snapshot_upgraded", to_version=version, weeks=len(data["weeks"]))
        data["schemaVersion"] = SCHEMA_VERSION
        return AppState.model_validate(data)
    except (ValidationError, TypeError, ValueError, AttributeError) as e:
        raise ImportFormatError(f"Snapshot could not be read: {e}") from e
