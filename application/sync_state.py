from enum import Enum
from threading import Lock
from typing import Dict, Optional


class SyncState(Enum):
    UNKNOWN = "unknown"
    SYNCING = "syncing"
    SYNCED = "synced"
    CACHED_ONLY = "cached_only"


BOARDS_KEY = "boards"
PROFILE_KEY = "profile"


def board_key(board_id: str) -> str:
    return f"board:{board_id}"


def group_key(group_id: str) -> str:
    return f"group:{group_id}"


def task_key(task_id: str) -> str:
    return f"task:{task_id}"


class SyncStateTracker:
    """Per-resource sync state; resources never seen report UNKNOWN."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._states: Dict[str, SyncState] = {}

    def get(self, key: str) -> SyncState:
        with self._lock:
            return self._states.get(key, SyncState.UNKNOWN)

    def set(self, key: str, state: SyncState) -> None:
        with self._lock:
            self._states[key] = state

    def forget(self, key: str) -> None:
        with self._lock:
            self._states.pop(key, None)

    def snapshot(self, prefix: Optional[str] = None) -> Dict[str, SyncState]:
        with self._lock:
            if prefix is None:
                return dict(self._states)
            return {k: v for k, v in self._states.items() if k.startswith(prefix)}
