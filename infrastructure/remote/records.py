"""Translation between in-memory entities and remote table rows.

Rows use the store's snake_case column names. Board rows carry their groups
under the `groups` embed alias and group rows their tasks under `tasks`, which
is the shape returned by the nested board fetch.
"""

from typing import Any, Dict, List, Optional

from core import (
    Automation,
    Board,
    Comment,
    Task,
    TaskGroup,
    TaskPriority,
    TaskStatus,
    UserProfile,
    UserRole,
    DEFAULT_GROUP_COLOR,
    parse_value,
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _opt_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _comments_to_record(comments: List[Comment]) -> List[Dict[str, Any]]:
    return [{"id": c.id, "user_id": c.user_id, "text": c.text, "timestamp": c.timestamp} for c in comments]


def _comments_from_record(items: Any) -> List[Comment]:
    comments: List[Comment] = []
    for item in items or []:
        comments.append(
            Comment(
                id=_text(item.get("id")),
                user_id=_text(item.get("user_id") or item.get("userId")),
                text=_text(item.get("text")),
                timestamp=_text(item.get("timestamp")),
            )
        )
    return comments


def _automations_to_record(automations: List[Automation]) -> List[Dict[str, Any]]:
    return [
        {
            "id": a.id,
            "name": a.name,
            "trigger": a.trigger,
            "condition": a.condition,
            "action": a.action,
            "is_active": a.is_active,
        }
        for a in automations
    ]


def _automations_from_record(items: Any) -> List[Automation]:
    result: List[Automation] = []
    for item in items or []:
        result.append(
            Automation(
                id=_text(item.get("id")),
                name=_text(item.get("name")),
                trigger=_text(item.get("trigger")),
                action=_text(item.get("action")),
                condition=_opt_text(item.get("condition")),
                is_active=bool(item.get("is_active", True)),
            )
        )
    return result


def task_to_record(task: Task) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": task.id,
        "group_id": task.group_id,
        "title": task.title,
        "description": task.description,
        "client_name": task.client_name,
        "client_phone": task.client_phone,
        "client_avatar": task.client_avatar,
        "client_idea": task.client_idea,
        "client_request": task.client_request,
        "value": task.value,
        "status": task.status.value,
        "priority": task.priority.value,
        "owner_id": task.owner_id,
        "start_date": task.start_date,
        "end_date": task.end_date,
        "comments": _comments_to_record(task.comments),
    }
    if task.created_at:
        record["created_at"] = task.created_at
    return record


def task_from_record(record: Dict[str, Any]) -> Task:
    return Task(
        id=_text(record["id"]),
        group_id=_text(record.get("group_id")),
        title=_text(record.get("title")),
        description=_text(record.get("description")),
        client_name=_text(record.get("client_name")),
        client_phone=_text(record.get("client_phone")),
        client_avatar=_text(record.get("client_avatar")),
        client_idea=_text(record.get("client_idea")),
        client_request=_text(record.get("client_request")),
        value=parse_value(record.get("value")),
        status=TaskStatus.from_string(record.get("status") or TaskStatus.STOPPED),
        priority=TaskPriority.from_string(record.get("priority") or TaskPriority.MEDIUM),
        owner_id=_text(record.get("owner_id")),
        start_date=_opt_text(record.get("start_date")),
        end_date=_opt_text(record.get("end_date")),
        comments=_comments_from_record(record.get("comments")),
        created_at=_opt_text(record.get("created_at")),
    )


def group_to_record(group: TaskGroup) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": group.id,
        "board_id": group.board_id,
        "name": group.name,
        "color": group.color,
    }
    if group.created_at:
        record["created_at"] = group.created_at
    return record


def group_from_record(record: Dict[str, Any]) -> TaskGroup:
    group = TaskGroup(
        id=_text(record["id"]),
        board_id=_text(record.get("board_id")),
        name=_text(record.get("name")),
        color=_text(record.get("color")) or DEFAULT_GROUP_COLOR,
        created_at=_opt_text(record.get("created_at")),
    )
    group.tasks = [task_from_record(t) for t in record.get("tasks") or []]
    return group


def board_to_record(board: Board) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": board.id,
        "name": board.name,
        "description": board.description,
        "members": list(board.members),
        "automations": _automations_to_record(board.automations),
    }
    if board.created_at:
        record["created_at"] = board.created_at
    return record


def board_from_record(record: Dict[str, Any]) -> Board:
    return Board(
        id=_text(record["id"]),
        name=_text(record.get("name")),
        description=_text(record.get("description")),
        members=[str(m) for m in record.get("members") or []],
        groups=[group_from_record(g) for g in record.get("groups") or []],
        automations=_automations_from_record(record.get("automations")),
        created_at=_opt_text(record.get("created_at")),
    )


def profile_to_record(profile: UserProfile) -> Dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "email": profile.email,
        "avatar": profile.avatar,
        "role": profile.role.value,
    }


def profile_from_record(record: Dict[str, Any]) -> UserProfile:
    return UserProfile(
        id=_text(record["id"]),
        name=_text(record.get("name")),
        email=_text(record.get("email")),
        avatar=_text(record.get("avatar")),
        role=UserRole.from_string(record.get("role") or UserRole.MEMBER),
    )
