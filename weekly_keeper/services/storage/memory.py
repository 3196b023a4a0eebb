"""In-memory storage, for tests and for running without a data file."""

import copy
from typing import Any, Optional

from weekly_keeper.services.storage.interface import StateStorageInterface


class InMemoryStorage(StateStorageInterface):
    """Keeps a deep copy of the last saved snapshot."""

    def __init__(self, payload: Optional[dict[str, Any]] = None):
        self._payload = copy.deepcopy(payload)
        self.save_count = 0

    def load_raw(self) -> Optional[dict[str, Any]]:
        return copy.deepcopy(self._payload)

    def save_raw(self, payload: dict[str, Any]) -> None:
        self._payload = copy.deepcopy(payload)
        self.save_count += 1
