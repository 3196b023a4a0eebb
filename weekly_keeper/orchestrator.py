"""
Main Orchestrator for WeeklyKeeper

This module ties together all the components and defines the
application service a UI calls for every user action:

1. Validate the input (nothing is mutated if it is rejected)
2. Mutate the state through the container / week store
3. Persist the full snapshot locally, synchronously
4. Schedule a debounced remote sync, if one is configured

Derived figures (wage, subsidy, net income) are never stored; they are
recomputed by the settlement engine whenever they are asked for.

DESIGN DECISION: A failed local write does not roll back the change in
memory. The session keeps working and exposes the failure through
`last_persistence_error` so the UI can warn that the data is at risk.
"""

from datetime import date, datetime
from typing import Any, Callable, Optional, Union

import structlog

from weekly_keeper.config import Settings, get_settings
from weekly_keeper.config.settings import AppSettings
from weekly_keeper.engine.categorizer import parse_clock_time, resolve_category
from weekly_keeper.engine.dates import (
    date_key_of,
    parse_date_key,
    week_start_key_of,
)
from weekly_keeper.engine.reports import history, monthly_summaries
from weekly_keeper.engine.settlement import compute_settlement, settle_day
from weekly_keeper.log import configure_logging
from weekly_keeper.models.expense import Category, Expense, ShiftMode
from weekly_keeper.models.settlement import (
    DaySettlement,
    HistoryWeek,
    MonthSummary,
    WeekSettlement,
)
from weekly_keeper.models.state import AppState
from weekly_keeper.models.week import WeekData, WeekDefaults
from weekly_keeper.services.storage import (
    ImportFormatError,
    JsonFileStorage,
    PersistenceError,
    StateStorageInterface,
)
from weekly_keeper.services.sync import (
    RemoteSyncInterface,
    RestSyncClient,
    SyncDebouncer,
    SyncError,
    SyncStatus,
    WebDAVSyncClient,
)
from weekly_keeper.services.transfer import ExportedFile, export_snapshot, parse_import
from weekly_keeper.store.state import StateContainer, initial_state
from weekly_keeper.validation import EntryValidator


logger = structlog.get_logger(__name__)


class WeeklyKeeperSession:
    """
    One user's working session over the application state.

    The clock is injectable so "today" and "this week" are testable.
    """

    def __init__(
        self,
        container: StateContainer,
        storage: Optional[StateStorageInterface] = None,
        sync: Optional[SyncDebouncer] = None,
        settings: Optional[AppSettings] = None,
        validator: Optional[EntryValidator] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._container = container
        self._storage = storage
        self._sync = sync
        self._settings = settings or AppSettings()
        self._validator = validator or EntryValidator(self._settings)
        self._clock = clock

        self.last_persistence_error: Optional[str] = None

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._container.state

    @property
    def container(self) -> StateContainer:
        return self._container

    @property
    def sync_status(self) -> SyncStatus:
        if self._sync is None or not self._sync.enabled:
            return SyncStatus.IDLE
        return self._sync.status

    def today_key(self) -> str:
        return date_key_of(self._clock())

    def week_key_for(self, day: Union[str, date, datetime]) -> str:
        if isinstance(day, str):
            day = parse_date_key(day)
        return week_start_key_of(day, self._settings.week_anchor)

    def current_week_key(self) -> str:
        return self.week_key_for(self._clock())

    def open_week(self, week_key: Optional[str] = None) -> WeekData:
        """
        The week as shown to the user, created from the defaults the first
        time it is viewed. A newly created week is persisted at once.
        """
        if week_key is not None:
            self._validator.ensure_valid(self._validator.validate_date_key(week_key))
        week_key = week_key or self.current_week_key()
        store = self._container.store
        created = week_key not in store
        week = store.get_or_create_week(week_key, self._container.defaults)
        if created:
            self._commit("week_opened", week=week_key)
        return week

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def log_hours(self, hours: Any, date_key: Optional[str] = None) -> None:
        """Record hours worked on a day (today by default)."""
        self._validator.ensure_valid(self._validator.validate_hours(hours))
        date_key = date_key or self.today_key()
        self._validator.ensure_valid(self._validator.validate_date_key(date_key))
        week_key = self.week_key_for(date_key)

        store = self._container.store
        store.get_or_create_week(week_key, self._container.defaults)
        store.set_hours_worked(week_key, date_key, float(hours))
        self._commit("hours_logged", week=week_key, date=date_key, hours=float(hours))

    def set_work_day(self, date_key: str, is_eligible: bool) -> None:
        """Mark a day as subsidy eligible (on shift) or not."""
        self._validator.ensure_valid(self._validator.validate_date_key(date_key))
        week_key = self.week_key_for(date_key)
        store = self._container.store
        store.get_or_create_week(week_key, self._container.defaults)
        store.set_work_day_flag(week_key, date_key, is_eligible)
        self._commit("work_day_set", week=week_key, date=date_key, eligible=bool(is_eligible))

    def add_expense(
        self,
        amount: Any,
        category: Optional[Category] = None,
        note: Optional[str] = None,
        time: Optional[str] = None,
    ) -> Expense:
        """
        Log an expense today, at `time` ("HH:MM") or now.

        Without an explicit category, one is derived from the logged
        clock time and the shift mode of the week it lands in.
        """
        self._validator.ensure_valid(self._validator.validate_amount(amount))
        if time is not None:
            self._validator.ensure_valid(self._validator.validate_clock_time(time))

        now = self._clock()
        logged_at = datetime.combine(now.date(), parse_clock_time(time)) if time else now
        week_key = self.week_key_for(logged_at)

        store = self._container.store
        week = store.get_or_create_week(week_key, self._container.defaults)
        expense = Expense.create(
            amount=float(amount),
            category=resolve_category(category, logged_at, week.shift_mode),
            logged_at=logged_at,
            note=note,
        )
        store.add_expense(week_key, expense)
        self._commit(
            "expense_added",
            week=week_key,
            expense_id=expense.id,
            amount=expense.amount,
            category=expense.category.value,
        )
        return expense

    def delete_expense(self, week_key: str, expense_id: str) -> bool:
        removed = self._container.store.delete_expense(week_key, expense_id)
        if removed:
            self._commit("expense_deleted", week=week_key, expense_id=expense_id)
        return removed

    def update_settings(
        self,
        daily_subsidy: Any,
        hourly_rate: Any,
        shift_mode: Any,
        apply_to_current_week: bool = True,
    ) -> None:
        """
        Change the defaults for future weeks and, by default, the
        settings of the current week too. Earlier weeks keep theirs.
        """
        self._validator.ensure_valid(
            self._validator.validate_settings(daily_subsidy, hourly_rate, shift_mode)
        )
        self._container.update_global_defaults(
            daily_subsidy=float(daily_subsidy),
            hourly_rate=float(hourly_rate),
            shift_mode=ShiftMode(shift_mode),
            apply_to_week=self.current_week_key() if apply_to_current_week else None,
        )
        self._commit("settings_updated", applied_to_current_week=apply_to_current_week)

    def import_json(self, content: Union[str, bytes]) -> None:
        """
        Replace the whole state with a backup file.

        Confirming the overwrite is the caller's job.

        Raises:
            ImportFormatError: If the file is malformed; state is untouched
        """
        payload = parse_import(content)
        self._container.replace_all(payload)
        self._commit("state_imported", weeks=len(self.state.weeks))

    def export_json(self) -> ExportedFile:
        return export_snapshot(self._container.serialize(), today=self._clock().date())

    async def restore_from_remote(self, transport: RemoteSyncInterface) -> bool:
        """
        Replace the state with the remote snapshot.

        Returns False (state untouched) if the remote holds nothing, is
        unreachable or holds a malformed snapshot.
        """
        try:
            payload = await transport.download()
        except SyncError as e:
            logger.warning("remote_restore_failed", transport=transport.name, error=str(e))
            return False
        if payload is None:
            return False
        try:
            self._container.replace_all(payload)
        except ImportFormatError as e:
            logger.error("remote_snapshot_invalid", transport=transport.name, error=str(e))
            return False
        self._commit("state_restored", transport=transport.name)
        return True

    async def flush_sync(self) -> bool:
        """Upload now instead of waiting for the quiet period (manual retry)."""
        if self._sync is None:
            return False
        self._sync.cancel()
        return await self._sync.flush()

    def _commit(self, action: str, **context: Any) -> None:
        """Persist the snapshot, then schedule a remote sync."""
        logger.info(action, **context)
        if self._storage is not None:
            try:
                self._storage.save_raw(self._container.serialize())
                self.last_persistence_error = None
            except PersistenceError as e:
                self.last_persistence_error = str(e)
                logger.error("persistence_failed", action=action, error=str(e))
        if self._sync is not None:
            self._sync.schedule()

    # -------------------------------------------------------------------------
    # Read models
    # -------------------------------------------------------------------------

    def week_settlement(self, week_key: Optional[str] = None) -> WeekSettlement:
        week = self.open_week(week_key)
        return compute_settlement(week, self._settings.settlement_policy)

    def day_settlement(self, date_key: Optional[str] = None) -> DaySettlement:
        date_key = date_key or self.today_key()
        self._validator.ensure_valid(self._validator.validate_date_key(date_key))
        week = self.open_week(self.week_key_for(date_key))
        return settle_day(week, date_key, self._settings.settlement_policy)

    def history(self) -> list[HistoryWeek]:
        return history(self.state, self._settings.settlement_policy)

    def monthly_summaries(self) -> list[MonthSummary]:
        return monthly_summaries(self.state, self._settings.settlement_policy)


# =============================================================================
# FACTORIES
# =============================================================================

def _initial_state(app: AppSettings) -> AppState:
    return initial_state(WeekDefaults(
        daily_subsidy=app.default_daily_subsidy,
        hourly_rate=app.default_hourly_rate,
        shift_mode=app.default_shift_mode,
    ))


def build_transports(settings: Settings) -> list[RemoteSyncInterface]:
    """The remote mirrors enabled in the configuration, REST first."""
    transports: list[RemoteSyncInterface] = []
    if settings.rest_sync.enabled:
        transports.append(RestSyncClient(settings.rest_sync))
    if settings.webdav.enabled:
        transports.append(WebDAVSyncClient(settings.webdav))
    return transports


async def bootstrap_state(
    storage: StateStorageInterface,
    remote: Optional[RemoteSyncInterface] = None,
    fallback: Optional[AppState] = None,
) -> StateContainer:
    """
    Load the state with remote-first precedence.

    The remote snapshot wins when it is reachable and readable, and is
    written through to local storage. Otherwise the local snapshot is
    used, and failing that the fallback state.
    """
    if remote is not None:
        try:
            payload = await remote.download()
        except SyncError as e:
            logger.warning("remote_load_failed", transport=remote.name, error=str(e))
            payload = None

        if payload is not None:
            try:
                container = StateContainer(StateContainer.deserialize(payload))
            except ImportFormatError as e:
                logger.error("remote_snapshot_invalid", transport=remote.name, error=str(e))
            else:
                try:
                    storage.save_raw(container.serialize())
                except PersistenceError as e:
                    logger.error("persistence_failed", action="bootstrap", error=str(e))
                logger.info("state_loaded_from_remote", transport=remote.name)
                return container

    return StateContainer.load(storage, fallback=fallback)


def _assemble(
    settings: Settings,
    storage: StateStorageInterface,
    container: StateContainer,
    transports: list[RemoteSyncInterface],
    clock: Callable[[], datetime],
) -> WeeklyKeeperSession:
    app = settings.app
    sync = None
    if transports:
        sync = SyncDebouncer(
            transports,
            snapshot=container.serialize,
            delay_seconds=app.sync_debounce_seconds,
        )
    return WeeklyKeeperSession(
        container=container,
        storage=storage,
        sync=sync,
        settings=app,
        clock=clock,
    )


def create_session(
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> WeeklyKeeperSession:
    """
    Factory for a session backed by the local data file.

    Loads the local snapshot only; use bootstrap_session() for
    remote-first loading.
    """
    settings = settings or get_settings()
    app = settings.app
    configure_logging(app.log_level)

    storage = JsonFileStorage(app.data_file)
    container = StateContainer.load(storage, fallback=_initial_state(app))
    return _assemble(settings, storage, container, build_transports(settings), clock)


async def bootstrap_session(
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> WeeklyKeeperSession:
    """Factory that prefers the REST snapshot over the local file at startup."""
    settings = settings or get_settings()
    app = settings.app
    configure_logging(app.log_level)

    storage = JsonFileStorage(app.data_file)
    transports = build_transports(settings)
    remote = next((t for t in transports if isinstance(t, RestSyncClient)), None)
    container = await bootstrap_state(storage, remote, fallback=_initial_state(app))
    return _assemble(settings, storage, container, transports, clock)
