from typing import Any, Dict, List, Optional

from core import Board, Task, TaskGroup, UserProfile, utc_now_iso

from .records import (
    board_from_record,
    board_to_record,
    group_to_record,
    profile_from_record,
    profile_to_record,
    task_to_record,
)
from .rest_client import RemoteError, RestClient

BOARDS_TABLE = "boards"
GROUPS_TABLE = "task_groups"
TASKS_TABLE = "tasks"

_UPSERT_PREFER = "resolution=merge-duplicates,return=minimal"
_DELETE_PREFER = "return=minimal"
_DEEP_SELECT = "*,groups:task_groups(*,tasks(*))"


class SupabaseRepository:
    """Typed access to the boards/task_groups/tasks/profile tables."""

    def __init__(self, client: RestClient, profile_table: str = "profiles") -> None:
        self.client = client
        self.profile_table = profile_table

    def close(self) -> None:
        self.client.close()

    def fetch_boards_deep(self) -> List[Board]:
        rows = self.client.request(
            "get",
            BOARDS_TABLE,
            params={
                "select": _DEEP_SELECT,
                "order": "created_at.asc",
                "groups.order": "created_at.asc",
                "groups.tasks.order": "created_at.asc",
            },
        )
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise RemoteError("boards: unexpected payload shape", code="DECODE")
        try:
            return [board_from_record(row) for row in rows]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise RemoteError(f"boards: malformed row ({exc})", code="DECODE") from exc

    def upsert_board(self, board: Board) -> None:
        self._upsert(BOARDS_TABLE, board_to_record(board))

    def delete_board(self, board_id: str) -> None:
        self._delete(BOARDS_TABLE, board_id)

    def upsert_group(self, group: TaskGroup) -> None:
        self._upsert(GROUPS_TABLE, group_to_record(group))

    def delete_group(self, group_id: str) -> None:
        self._delete(GROUPS_TABLE, group_id)

    def upsert_task(self, task: Task) -> None:
        self._upsert(TASKS_TABLE, task_to_record(task))

    def delete_task(self, task_id: str) -> None:
        self._delete(TASKS_TABLE, task_id)

    def fetch_user_profile(self, profile_id: str) -> Optional[UserProfile]:
        rows = self.client.request(
            "get",
            self.profile_table,
            params={"select": "*", "id": f"eq.{profile_id}", "limit": "1"},
        )
        if not rows:
            return None
        try:
            return profile_from_record(list(rows)[0])
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise RemoteError(f"{self.profile_table}: malformed row ({exc})", code="DECODE") from exc

    def upsert_user_profile(self, profile: UserProfile) -> None:
        record = profile_to_record(profile)
        record["updated_at"] = utc_now_iso()
        self._upsert(self.profile_table, record)

    def _upsert(self, table: str, record: Dict[str, Any]) -> None:
        self.client.request("post", table, params={"on_conflict": "id"}, payload=[record], prefer=_UPSERT_PREFER)

    def _delete(self, table: str, entity_id: str) -> None:
        self.client.request("delete", table, params={"id": f"eq.{entity_id}"}, prefer=_DELETE_PREFER)
