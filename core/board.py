"""Board → Group → Task hierarchy.

Attribute names are snake_case. `to_dict`/`from_dict` produce the camelCase
documents the dashboard keeps in its local snapshot; the remote column mapping
lives in `infrastructure.remote.records`.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .status import DEFAULT_PRIORITY, DEFAULT_STATUS, TaskPriority, TaskStatus

DEFAULT_GROUP_COLOR = "#D4AF37"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_value(value: Any) -> Optional[float]:
    """Normalize a monetary value; None stays None, negatives are rejected."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid task value: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid task value: {value!r}") from exc
    if not math.isfinite(number) or number < 0:
        raise ValueError(f"Task value must be a non-negative number: {value!r}")
    return number


@dataclass
class Comment:
    id: str
    user_id: str
    text: str
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "userId": self.user_id, "text": self.text, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId") or ""),
            text=str(data.get("text") or ""),
            timestamp=str(data.get("timestamp") or ""),
        )


@dataclass
class Automation:
    """Board automation rule; carried through sync untouched."""

    id: str
    name: str
    trigger: str
    action: str
    condition: Optional[str] = None
    is_active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "trigger": self.trigger,
            "condition": self.condition,
            "action": self.action,
            "isActive": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Automation":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            trigger=str(data.get("trigger") or ""),
            action=str(data.get("action") or ""),
            condition=_optional_str(data.get("condition")),
            is_active=bool(data.get("isActive", True)),
        )


@dataclass
class Task:
    id: str
    group_id: str
    title: str
    description: str = ""
    client_name: str = ""
    client_phone: str = ""
    client_avatar: str = ""  # data URI or URL
    client_idea: str = ""
    client_request: str = ""
    value: Optional[float] = None
    status: TaskStatus = DEFAULT_STATUS
    priority: TaskPriority = DEFAULT_PRIORITY
    owner_id: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    comments: List[Comment] = field(default_factory=list)
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "groupId": self.group_id,
            "title": self.title,
            "description": self.description,
            "clientName": self.client_name,
            "clientPhone": self.client_phone,
            "clientAvatar": self.client_avatar,
            "clientIdea": self.client_idea,
            "clientRequest": self.client_request,
            "value": self.value,
            "status": self.status.value,
            "priority": self.priority.value,
            "ownerId": self.owner_id,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "comments": [c.to_dict() for c in self.comments],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data["id"]),
            group_id=str(data.get("groupId") or ""),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            client_name=str(data.get("clientName") or ""),
            client_phone=str(data.get("clientPhone") or ""),
            client_avatar=str(data.get("clientAvatar") or ""),
            client_idea=str(data.get("clientIdea") or ""),
            client_request=str(data.get("clientRequest") or ""),
            value=parse_value(data.get("value")),
            status=TaskStatus.from_string(data.get("status") or DEFAULT_STATUS),
            priority=TaskPriority.from_string(data.get("priority") or DEFAULT_PRIORITY),
            owner_id=str(data.get("ownerId") or ""),
            start_date=_optional_str(data.get("startDate")),
            end_date=_optional_str(data.get("endDate")),
            comments=[Comment.from_dict(c) for c in data.get("comments") or []],
            created_at=_optional_str(data.get("createdAt")),
        )


@dataclass
class TaskGroup:
    id: str
    board_id: str
    name: str
    color: str = DEFAULT_GROUP_COLOR
    tasks: List[Task] = field(default_factory=list)
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "boardId": self.board_id,
            "name": self.name,
            "color": self.color,
            "tasks": [t.to_dict() for t in self.tasks],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], board_id: str = "") -> "TaskGroup":
        group = cls(
            id=str(data["id"]),
            board_id=str(data.get("boardId") or board_id),
            name=str(data.get("name") or ""),
            color=str(data.get("color") or DEFAULT_GROUP_COLOR),
            created_at=_optional_str(data.get("createdAt")),
        )
        group.tasks = [Task.from_dict(t) for t in data.get("tasks") or []]
        for task in group.tasks:
            if not task.group_id:
                task.group_id = group.id
        return group


@dataclass
class Board:
    id: str
    name: str
    description: str = ""
    members: List[str] = field(default_factory=list)
    groups: List[TaskGroup] = field(default_factory=list)
    automations: List[Automation] = field(default_factory=list)
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "members": list(self.members),
            "groups": [g.to_dict() for g in self.groups],
            "automations": [a.to_dict() for a in self.automations],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        board_id = str(data["id"])
        return cls(
            id=board_id,
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            members=[str(m) for m in data.get("members") or []],
            groups=[TaskGroup.from_dict(g, board_id) for g in data.get("groups") or []],
            automations=[Automation.from_dict(a) for a in data.get("automations") or []],
            created_at=_optional_str(data.get("createdAt")),
        )

    def iter_tasks(self) -> Iterator[Task]:
        for group in self.groups:
            yield from group.tasks


def find_board(boards: List[Board], board_id: str) -> Optional[Board]:
    for board in boards:
        if board.id == board_id:
            return board
    return None


def find_group(boards: List[Board], group_id: str) -> Optional[Tuple[Board, TaskGroup]]:
    for board in boards:
        for group in board.groups:
            if group.id == group_id:
                return board, group
    return None


def find_task(boards: List[Board], task_id: str) -> Optional[Tuple[Board, TaskGroup, Task]]:
    for board in boards:
        for group in board.groups:
            for task in group.tasks:
                if task.id == task_id:
                    return board, group, task
    return None


def boards_to_dicts(boards: List[Board]) -> List[Dict[str, Any]]:
    return [b.to_dict() for b in boards]


def boards_from_dicts(items: List[Dict[str, Any]]) -> List[Board]:
    return [Board.from_dict(item) for item in items]


def seed_boards() -> List[Board]:
    """Demonstration board shown when there is nothing to load."""
    now = utc_now_iso()
    task = Task(
        id="t-init-1",
        group_id="g-main",
        title="Configuração do Ecossistema",
        description="Definição de parâmetros de IA e integração de dados.",
        value=15000.0,
        status=TaskStatus.WORKING,
        priority=TaskPriority.CRITICAL,
        owner_id="1",
        created_at=now,
    )
    group = TaskGroup(id="g-main", board_id="board-alpha", name="Fase de Lançamento", tasks=[task], created_at=now)
    return [
        Board(
            id="board-alpha",
            name="Operação Expandix Prime",
            description="Gestão estratégica de ativos e expansão neural.",
            members=["1"],
            groups=[group],
            created_at=now,
        )
    ]
