from .status import TaskStatus, TaskPriority, UserRole, DEFAULT_STATUS, DEFAULT_PRIORITY
from .board import (
    Board,
    TaskGroup,
    Task,
    Comment,
    Automation,
    DEFAULT_GROUP_COLOR,
    new_id,
    utc_now_iso,
    parse_value,
    find_board,
    find_group,
    find_task,
    boards_to_dicts,
    boards_from_dicts,
    seed_boards,
)
from .user import UserProfile, DEFAULT_PROFILE_ID, default_profile

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "UserRole",
    "DEFAULT_STATUS",
    "DEFAULT_PRIORITY",
    # Hierarchy
    "Board",
    "TaskGroup",
    "Task",
    "Comment",
    "Automation",
    "DEFAULT_GROUP_COLOR",
    "new_id",
    "utc_now_iso",
    "parse_value",
    "find_board",
    "find_group",
    "find_task",
    "boards_to_dicts",
    "boards_from_dicts",
    "seed_boards",
    # Profile
    "UserProfile",
    "DEFAULT_PROFILE_ID",
    "default_profile",
]
