from typing import List, Optional, Protocol

from core import Board, Task, TaskGroup, UserProfile


class BoardCache(Protocol):
    def read_boards(self) -> List[Board]:
        ...

    def write_boards(self, boards: List[Board]) -> None:
        ...

    def has_boards(self) -> bool:
        ...

    def read_user_profile(self) -> UserProfile:
        ...

    def write_user_profile(self, profile: UserProfile) -> None:
        ...


class RemoteRepository(Protocol):
    def fetch_boards_deep(self) -> List[Board]:
        ...

    def upsert_board(self, board: Board) -> None:
        ...

    def delete_board(self, board_id: str) -> None:
        ...

    def upsert_group(self, group: TaskGroup) -> None:
        ...

    def delete_group(self, group_id: str) -> None:
        ...

    def upsert_task(self, task: Task) -> None:
        ...

    def delete_task(self, task_id: str) -> None:
        ...

    def fetch_user_profile(self, profile_id: str) -> Optional[UserProfile]:
        ...

    def upsert_user_profile(self, profile: UserProfile) -> None:
        ...
