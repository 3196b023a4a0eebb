"""Tests for the week store, the state container and snapshot migration."""

from datetime import datetime

import pytest

from conftest import MON, SUN, TUE, WEEK_KEY, make_expense, make_week
from weekly_keeper.models import (
    SCHEMA_VERSION,
    AppState,
    Category,
    ShiftMode,
    WeekDefaults,
)
from weekly_keeper.services.storage import (
    CorruptSnapshotError,
    ImportFormatError,
    InMemoryStorage,
    JsonFileStorage,
    StateStorageInterface,
)
from weekly_keeper.store import (
    StateContainer,
    UnknownWeekError,
    WeekRecordStore,
    initial_state,
    migrate,
)


class TestWeekRecordStore:
    """Tests for the week store."""

    def test_new_week_is_seeded_from_defaults(self):
        """Test that a new week copies the defaults and flags Monday to Saturday."""
        store = WeekRecordStore({})
        defaults = WeekDefaults(daily_subsidy=30, hourly_rate=22, shift_mode=ShiftMode.NIGHT)
        week = store.get_or_create_week(WEEK_KEY, defaults)
        assert week.week_start_date == WEEK_KEY
        assert week.daily_subsidy == 30
        assert week.hourly_rate == 22
        assert week.shift_mode == ShiftMode.NIGHT
        assert sorted(k for k, v in week.work_days.items() if v) == [
            "2024-03-04", "2024-03-05", "2024-03-06",
            "2024-03-07", "2024-03-08", "2024-03-09",
        ]
        assert SUN not in week.work_days
        assert week.budget == 180

    def test_existing_week_is_returned_unchanged(self):
        """Test that an existing week ignores the defaults."""
        weeks = {WEEK_KEY: make_week(daily_subsidy=10)}
        store = WeekRecordStore(weeks)
        week = store.get_or_create_week(WEEK_KEY, WeekDefaults(daily_subsidy=99))
        assert week is weeks[WEEK_KEY]
        assert week.daily_subsidy == 10

    def test_mutations(self):
        """Test hours, flags and expenses on a week."""
        store = WeekRecordStore({})
        store.get_or_create_week(WEEK_KEY, WeekDefaults())
        store.set_hours_worked(WEEK_KEY, MON, 8)
        store.set_hours_worked(WEEK_KEY, MON, 6)
        store.set_work_day_flag(WEEK_KEY, SUN, True)
        first, second = make_expense(MON, 5), make_expense(TUE, 6)
        store.add_expense(WEEK_KEY, first)
        store.add_expense(WEEK_KEY, second)

        week = store.get_week(WEEK_KEY)
        assert week.daily_hours == {MON: 6}
        assert week.work_days[SUN] is True
        assert [e.id for e in week.expenses] == [second.id, first.id]

    def test_delete_expense(self):
        """Test deleting an expense by id."""
        expense = make_expense(MON, 5)
        store = WeekRecordStore({WEEK_KEY: make_week()})
        store.add_expense(WEEK_KEY, expense)
        assert store.delete_expense(WEEK_KEY, "nope") is False
        assert store.delete_expense("2020-01-06", expense.id) is False
        assert store.delete_expense(WEEK_KEY, expense.id) is True
        assert store.get_week(WEEK_KEY).expenses == []

    def test_mutating_unknown_week_raises(self):
        """Test that changing a missing week raises UnknownWeekError."""
        store = WeekRecordStore({})
        with pytest.raises(UnknownWeekError):
            store.set_hours_worked(WEEK_KEY, MON, 8)
        with pytest.raises(KeyError):
            store.add_expense(WEEK_KEY, make_expense(MON, 1))

    def test_update_week_settings_does_not_cascade(self):
        """Test that week settings do not reach other weeks."""
        weeks = {
            WEEK_KEY: make_week(),
            "2024-03-11": make_week("2024-03-11"),
        }
        store = WeekRecordStore(weeks)
        store.update_week_settings(WEEK_KEY, 35, 40, "night")
        assert weeks[WEEK_KEY].daily_subsidy == 35
        assert weeks[WEEK_KEY].shift_mode == ShiftMode.NIGHT
        assert weeks["2024-03-11"].daily_subsidy == 28

    def test_ghost_weeks_hidden_but_kept(self):
        """Test that ghost weeks are kept but not listed."""
        weeks = {
            WEEK_KEY: make_week(spends={MON: 1}),
            "2024-03-11": make_week("2024-03-11"),
        }
        store = WeekRecordStore(weeks)
        assert [w.week_start_date for w in store.visible_weeks()] == [WEEK_KEY]
        assert len(store) == 2

    def test_prune_is_explicit_and_bounded(self):
        """Test that pruning removes only ghost weeks before the cut-off."""
        weeks = {
            "2024-02-26": make_week("2024-02-26"),
            WEEK_KEY: make_week(spends={MON: 1}),
            "2024-03-11": make_week("2024-03-11"),
        }
        store = WeekRecordStore(weeks)
        assert store.prune_ghost_weeks("2024-03-11") == ["2024-02-26"]
        assert sorted(weeks) == [WEEK_KEY, "2024-03-11"]


class TestMigration:
    """Tests for upgrading saved snapshots."""

    def _legacy_payload(self):
        return {
            "currentBudgetSetting": 168,
            "currentShiftSetting": "night",
            "weeks": {
                WEEK_KEY: {
                    "budget": 150,
                    "expenses": [
                        {
                            "id": "a",
                            "amount": 12,
                            "category": "早餐",
                            "timestamp": int(datetime(2024, 3, 5, 8, 0).timestamp() * 1000),
                        },
                        {
                            "id": "b",
                            "amount": 20,
                            "category": "Lunch",
                            "timestamp": 0,
                            "dateStr": MON,
                        },
                    ],
                },
            },
        }

    def test_legacy_payload_is_backfilled(self):
        """Test that a legacy snapshot gets every current field."""
        state = migrate(self._legacy_payload())
        assert state.schema_version == SCHEMA_VERSION
        assert state.global_daily_subsidy_default == 28
        assert state.global_hourly_rate_default == 0
        assert state.global_shift_default == ShiftMode.NIGHT

        week = state.weeks[WEEK_KEY]
        assert week.week_start_date == WEEK_KEY
        assert week.daily_subsidy == 25
        assert week.hourly_rate == 0
        assert week.shift_mode == ShiftMode.DAY
        assert week.daily_hours == {}
        assert week.eligible_day_count == 6
        assert week.work_days.get(SUN) is None
        assert week.expenses[0].category == Category.BREAKFAST
        assert week.expenses[0].date_key == TUE
        assert week.expenses[1].date_key == MON

    def test_no_budget_falls_back_to_default_subsidy(self):
        """Test the default subsidy when no budget was saved."""
        state = migrate({"weeks": {WEEK_KEY: {"expenses": []}}})
        assert state.global_daily_subsidy_default == 28
        assert state.weeks[WEEK_KEY].daily_subsidy == 28

    def test_current_field_names_are_kept(self):
        """Test that current field names are read as they are."""
        state = migrate({
            "globalDailySubsidyDefault": 35,
            "globalHourlyRateDefault": 20,
            "weeks": {},
        })
        assert state.global_daily_subsidy_default == 35
        assert state.global_hourly_rate_default == 20

    def test_input_is_not_modified(self):
        """Test that migration does not modify its input."""
        payload = self._legacy_payload()
        migrate(payload)
        assert payload == self._legacy_payload()

    def test_current_snapshot_round_trips(self):
        """Test that a current snapshot loads back unchanged."""
        container = StateContainer(AppState(weeks={WEEK_KEY: make_week(spends={MON: 4})}))
        raw = container.serialize()
        assert raw["schemaVersion"] == SCHEMA_VERSION
        assert StateContainer.deserialize(raw).model_dump() == container.state.model_dump()

    @pytest.mark.parametrize("payload", [
        None,
        [],
        {},
        {"weeks": []},
        {"weeks": {WEEK_KEY: "not a week"}},
        {"weeks": {WEEK_KEY: {"expenses": [{"amount": "lots", "timestamp": 0}]}}},
    ])
    def test_unreadable_snapshots_are_rejected(self, payload):
        """Test that unreadable snapshots raise ImportFormatError."""
        with pytest.raises(ImportFormatError):
            migrate(payload)


class _BrokenStorage(StateStorageInterface):
    """Storage whose snapshot cannot be read."""

    def load_raw(self):
        raise CorruptSnapshotError("bad json")

    def save_raw(self, payload):
        pass


class TestStateContainer:
    """Tests for the state container."""

    def test_initial_state(self):
        """Test the state of a fresh installation."""
        state = initial_state()
        assert state.global_daily_subsidy_default == 28
        assert state.global_hourly_rate_default == 0
        assert state.global_shift_default == ShiftMode.DAY
        assert state.weeks == {}

    def test_load_without_snapshot_uses_fallback(self):
        """Test loading with nothing saved."""
        fallback = initial_state(WeekDefaults(daily_subsidy=40))
        container = StateContainer.load(InMemoryStorage(), fallback=fallback)
        assert container.state.global_daily_subsidy_default == 40

    @pytest.mark.parametrize("storage", [
        _BrokenStorage(),
        InMemoryStorage({"no": "weeks"}),
    ])
    def test_load_never_fails(self, storage):
        """Test that unreadable snapshots fall back to the initial state."""
        container = StateContainer.load(storage)
        assert container.state.model_dump() == initial_state().model_dump()

    def test_load_falls_back_on_undecodable_file(self, tmp_path):
        """Test that a file that is not UTF-8 falls back to the initial state."""
        path = tmp_path / "data.json"
        path.write_bytes(b'{"weeks": {}, "note": "\xff\xfe"}')
        container = StateContainer.load(JsonFileStorage(path))
        assert container.state.model_dump() == initial_state().model_dump()

    def test_load_persisted_snapshot(self):
        """Test loading a saved snapshot."""
        saved = StateContainer(AppState(weeks={WEEK_KEY: make_week(spends={MON: 4})}))
        container = StateContainer.load(InMemoryStorage(saved.serialize()))
        assert container.state.model_dump() == saved.state.model_dump()

    def test_update_defaults_touches_only_the_named_week(self):
        """Test that new defaults reach only the named week."""
        container = StateContainer(AppState(weeks={"2024-02-26": make_week("2024-02-26")}))
        container.update_global_defaults(35, 20, ShiftMode.NIGHT, apply_to_week=WEEK_KEY)

        assert container.defaults == WeekDefaults(
            daily_subsidy=35, hourly_rate=20, shift_mode=ShiftMode.NIGHT
        )
        current = container.store.get_week(WEEK_KEY)
        assert current.daily_subsidy == 35
        assert current.shift_mode == ShiftMode.NIGHT
        assert container.store.get_week("2024-02-26").daily_subsidy == 28

    def test_later_weeks_are_seeded_from_new_defaults(self):
        """Test that weeks created later use the new defaults."""
        container = StateContainer()
        container.update_global_defaults(30, 18, ShiftMode.DAY)
        week = container.store.get_or_create_week(WEEK_KEY, container.defaults)
        assert week.daily_subsidy == 30
        assert week.hourly_rate == 18

    def test_replace_all(self):
        """Test replacing the state with a legacy snapshot."""
        container = StateContainer()
        container.replace_all({"weeks": {WEEK_KEY: {"budget": 60}}})
        assert WEEK_KEY in container.store
        assert container.state.weeks[WEEK_KEY].daily_subsidy == 10

    def test_replace_all_rejects_without_touching_state(self):
        """Test that a rejected replacement leaves the state as it was."""
        container = StateContainer(AppState(weeks={WEEK_KEY: make_week()}))
        before = container.serialize()
        with pytest.raises(ImportFormatError):
            container.replace_all({"version": 1})
        assert container.serialize() == before
