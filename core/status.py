from enum import Enum
from typing import Final, Union


class TaskStatus(Enum):
    STOPPED = "PARADO"
    WORKING = "EM ANDAMENTO"
    DONE = "CONCLUIDO"

    @classmethod
    def from_string(cls, value: Union["TaskStatus", str]) -> "TaskStatus":
        return _parse_member(cls, value, "task status")


class TaskPriority(Enum):
    LOW = "Baixa"
    MEDIUM = "Média"
    HIGH = "Alta"
    CRITICAL = "Crítica"

    @classmethod
    def from_string(cls, value: Union["TaskPriority", str]) -> "TaskPriority":
        return _parse_member(cls, value, "task priority")


class UserRole(Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    GUEST = "GUEST"

    @classmethod
    def from_string(cls, value: Union["UserRole", str]) -> "UserRole":
        return _parse_member(cls, value, "user role")


DEFAULT_STATUS: Final[TaskStatus] = TaskStatus.STOPPED
DEFAULT_PRIORITY: Final[TaskPriority] = TaskPriority.MEDIUM


def _parse_member(enum_cls, value, label: str):
    """Accept an enum member, its name or its stored label (case-insensitive).

    The enumerations are closed: anything else raises ValueError.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid {label}: {value!r}")
    token = value.strip()
    folded = token.casefold()
    for member in enum_cls:
        if folded == member.name.casefold() or folded == member.value.casefold():
            return member
    raise ValueError(f"Invalid {label}: {value!r}")
