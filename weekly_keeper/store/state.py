"""
Application State Container

Holds the single AppState of an installation: the global defaults and
the week map. It is the unit that gets loaded, saved, imported,
exported and synced.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

import structlog

from weekly_keeper.models.expense import ShiftMode
from weekly_keeper.models.state import AppState
from weekly_keeper.models.week import WeekDefaults
from weekly_keeper.services.storage.interface import (
    ImportFormatError,
    StateStorageInterface,
    StorageError,
)
from weekly_keeper.store.migration import migrate
from weekly_keeper.store.weeks import WeekRecordStore


logger = structlog.get_logger(__name__)


def initial_state(defaults: Optional[WeekDefaults] = None) -> AppState:
    """The state of a fresh installation."""
    defaults = defaults or WeekDefaults()
    return AppState(
        global_daily_subsidy_default=defaults.daily_subsidy,
        global_hourly_rate_default=defaults.hourly_rate,
        global_shift_default=defaults.shift_mode,
    )


class StateContainer:
    """
    Owner of the current AppState.

    Week-level mutations go through `store`; whole-state operations
    (defaults, replace, serialize) live here.
    """

    def __init__(self, state: Optional[AppState] = None):
        self._state = state if state is not None else initial_state()
        self._store = WeekRecordStore(self._state.weeks)

    @classmethod
    def load(
        cls,
        storage: Optional[StateStorageInterface] = None,
        fallback: Optional[AppState] = None,
    ) -> "StateContainer":
        """
        Load the persisted snapshot, or start from the fallback state.

        A missing, unreadable or malformed snapshot never fails the
        load; it is logged and the fallback (or the initial state) is used.
        """
        fallback = fallback if fallback is not None else initial_state()
        if storage is None:
            return cls(fallback)

        try:
            raw = storage.load_raw()
        except StorageError as e:
            logger.error("snapshot_load_failed", error=str(e))
            return cls(fallback)

        if raw is None:
            logger.info("snapshot_missing_using_initial_state")
            return cls(fallback)

        try:
            state = cls.deserialize(raw)
        except ImportFormatError as e:
            logger.error("snapshot_invalid", error=str(e))
            return cls(fallback)

        logger.info("snapshot_loaded", weeks=len(state.weeks))
        return cls(state)

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def store(self) -> WeekRecordStore:
        return self._store

    @property
    def defaults(self) -> WeekDefaults:
        """Template for weeks created from now on."""
        return self._state.defaults

    def update_global_defaults(
        self,
        daily_subsidy: float,
        hourly_rate: float,
        shift_mode: ShiftMode,
        apply_to_week: Optional[str] = None,
    ) -> None:
        """
        Set the defaults for future weeks.

        Existing weeks keep their own settings, except the one named by
        apply_to_week (normally the week being viewed), which is updated
        too. That week is created first if it does not exist yet.
        """
        self._state.global_daily_subsidy_default = daily_subsidy
        self._state.global_hourly_rate_default = hourly_rate
        self._state.global_shift_default = ShiftMode(shift_mode)

        if apply_to_week is not None:
            self._store.get_or_create_week(apply_to_week, self.defaults)
            self._store.update_week_settings(
                apply_to_week, daily_subsidy, hourly_rate, shift_mode
            )

    def replace_all(self, new_state: Union[AppState, Mapping[str, Any]]) -> None:
        """
        Overwrite the whole state (import / restore). No merge.

        Raises:
            ImportFormatError: If a raw snapshot has no "weeks" map or
                cannot be read; the current state is left untouched
        """
        if not isinstance(new_state, AppState):
            new_state = self.deserialize(new_state)
        self._state = new_state
        self._store = WeekRecordStore(self._state.weeks)
        logger.info("state_replaced", weeks=len(new_state.weeks))

    def serialize(self) -> dict[str, Any]:
        """The wire-format dict shared by storage, import/export and sync."""
        return self._state.model_dump(mode="json", by_alias=True)

    @staticmethod
    def deserialize(raw: Mapping[str, Any]) -> AppState:
        """Wire-format dict (any schema version) to AppState."""
        return migrate(raw)
