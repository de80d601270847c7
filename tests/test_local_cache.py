import json
import os

from core import Board, Task, TaskGroup, UserProfile, UserRole
from infrastructure import local_cache
from infrastructure.local_cache import BOARDS_KEY, PROFILE_KEY, JsonFileCache


def _boards():
    task = Task(id="t-1", group_id="g-1", title="Demo", value=10.0)
    return [Board(id="b-1", name="Board", groups=[TaskGroup(id="g-1", board_id="b-1", name="G", tasks=[task])])]


def test_empty_cache_reads_empty_and_default(tmp_path):
    cache = JsonFileCache(tmp_path / "cache")

    assert cache.read_boards() == []
    assert cache.has_boards() is False
    profile = cache.read_user_profile()
    assert profile.id == "1"
    assert profile.role is UserRole.ADMIN


def test_boards_roundtrip_survives_new_instance(tmp_path):
    JsonFileCache(tmp_path).write_boards(_boards())

    reopened = JsonFileCache(tmp_path)
    assert reopened.has_boards() is True
    assert reopened.read_boards() == _boards()


def test_profile_roundtrip(tmp_path):
    cache = JsonFileCache(tmp_path)
    profile = UserProfile(id="7", name="Bia", email="bia@example.com", role=UserRole.GUEST)
    cache.write_user_profile(profile)

    assert JsonFileCache(tmp_path).read_user_profile() == profile


def test_corrupt_entries_degrade_to_empty(tmp_path):
    cache = JsonFileCache(tmp_path)
    (tmp_path / f"{BOARDS_KEY}.json").write_text("{not json", encoding="utf-8")
    (tmp_path / f"{PROFILE_KEY}.json").write_text(json.dumps({"name": "no id"}), encoding="utf-8")

    assert cache.read_boards() == []
    assert cache.has_boards() is False
    assert cache.read_user_profile().id == "1"

    (tmp_path / f"{BOARDS_KEY}.json").write_text(json.dumps([{"id": "b", "groups": [{"id": "g", "tasks": [{"id": "t", "status": "BOGUS"}]}]}]), encoding="utf-8")
    assert cache.read_boards() == []


def test_write_leaves_no_temp_files(tmp_path):
    cache = JsonFileCache(tmp_path)
    cache.write_boards(_boards())
    cache.write_boards([])

    assert sorted(p.name for p in tmp_path.iterdir()) == [f"{BOARDS_KEY}.json"]
    assert cache.read_boards() == []
    assert cache.has_boards() is True


def test_write_failure_is_absorbed_and_keeps_previous_snapshot(tmp_path, monkeypatch):
    cache = JsonFileCache(tmp_path)
    cache.write_boards(_boards())

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(local_cache.os, "replace", boom)
    cache.write_boards([])

    monkeypatch.setattr(local_cache.os, "replace", os.replace)
    assert cache.read_boards() == _boards()
    assert not [p for p in tmp_path.iterdir() if p.suffix == ".tmp"]


def test_clear_removes_entries(tmp_path):
    cache = JsonFileCache(tmp_path)
    cache.write_boards(_boards())
    cache.write_user_profile(UserProfile(id="2", name="x", email="x@y"))

    cache.clear()

    assert cache.read_boards() == []
    assert cache.read_user_profile().id == "1"
