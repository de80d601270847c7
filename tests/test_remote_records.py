from core import Automation, Board, Comment, Task, TaskGroup, TaskPriority, TaskStatus, UserProfile, UserRole
from infrastructure.remote.records import (
    board_from_record,
    board_to_record,
    group_from_record,
    group_to_record,
    profile_from_record,
    profile_to_record,
    task_from_record,
    task_to_record,
)


def _full_task() -> Task:
    return Task(
        id="t-42",
        group_id="g-1",
        title="Brand refresh",
        description="New logo and palette",
        client_name="Carla",
        client_phone="+55 11 99999-0000",
        client_avatar="data:image/png;base64,AAAA",
        client_idea="Minimal",
        client_request="Deliver by Friday",
        value=9800.0,
        status=TaskStatus.DONE,
        priority=TaskPriority.CRITICAL,
        owner_id="1",
        start_date="2025-03-01",
        end_date="2025-03-15",
        comments=[Comment(id="c-1", user_id="2", text="Approved", timestamp="2025-03-02T10:00:00+00:00")],
        created_at="2025-03-01T09:00:00+00:00",
    )


def test_task_record_roundtrip_preserves_every_field():
    task = _full_task()
    record = task_to_record(task)

    assert record["status"] == "CONCLUIDO"
    assert record["priority"] == "Crítica"
    assert record["client_phone"] == "+55 11 99999-0000"
    assert record["comments"][0]["user_id"] == "2"
    assert task_from_record(record) == task
    assert task_to_record(task_from_record(record)) == record


def test_task_record_without_optionals_uses_defaults():
    task = task_from_record({"id": "t-1", "group_id": "g-1", "title": "x", "value": None, "status": None})
    assert task.value is None
    assert task.status is TaskStatus.STOPPED
    assert task.priority is TaskPriority.MEDIUM
    assert task.start_date is None
    assert "created_at" not in task_to_record(task)


def test_group_record_reads_nested_tasks_in_order():
    record = group_to_record(TaskGroup(id="g-1", board_id="b-1", name="Launch", color="#123456"))
    assert "tasks" not in record
    record["tasks"] = [task_to_record(_full_task()), {"id": "t-43", "group_id": "g-1", "title": "Second"}]

    group = group_from_record(record)
    assert group.color == "#123456"
    assert [t.id for t in group.tasks] == ["t-42", "t-43"]


def test_board_record_roundtrip_with_automations():
    board = Board(
        id="b-1",
        name="Client A",
        description="demo",
        members=["1", "2"],
        automations=[Automation(id="a-1", name="notify", trigger="status_change", action="email", condition=None)],
        created_at="2025-01-01T00:00:00+00:00",
    )
    record = board_to_record(board)
    assert "groups" not in record
    assert record["automations"][0]["is_active"] is True

    record["groups"] = [dict(group_to_record(TaskGroup(id="g-1", board_id="b-1", name="G")), tasks=[])]
    restored = board_from_record(record)
    assert restored.automations == board.automations
    assert restored.groups[0].id == "g-1"
    assert restored.members == ["1", "2"]


def test_profile_record_roundtrip():
    profile = UserProfile(id="1", name="Dir", email="d@example.com", avatar="", role=UserRole.ADMIN)
    record = profile_to_record(profile)
    assert record["role"] == "ADMIN"
    assert profile_from_record(record) == profile
