"""
Store Package

In-memory ownership of the application state: the week map, the
container around it, and the migration that upgrades old snapshots.
"""

from weekly_keeper.store.migration import SCHEMA_VERSION, migrate
from weekly_keeper.store.state import StateContainer, initial_state
from weekly_keeper.store.weeks import UnknownWeekError, WeekRecordStore

__all__ = [
    "SCHEMA_VERSION",
    "StateContainer",
    "UnknownWeekError",
    "WeekRecordStore",
    "initial_state",
    "migrate",
]
