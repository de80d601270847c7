import json

import pytest

import config
from application.sync_coordinator import SyncCoordinator
from infrastructure.local_cache import JsonFileCache
from infrastructure.remote.rest_client import RemoteError, RemoteErrorCategory
from interface import app, runtime


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "USER_CONFIG_PATH", tmp_path / "boardsync.yaml")
    monkeypatch.setenv("BOARDSYNC_CACHE_DIR", str(tmp_path / "cache"))
    for name in ("BOARDSYNC_SUPABASE_URL", "BOARDSYNC_SUPABASE_KEY", "BOARDSYNC_LOCAL_ONLY", "BOARDSYNC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def _run(capsys, *argv):
    code = app.main(list(argv))
    out = capsys.readouterr().out
    return code, json.loads(out)


def test_no_command_prints_help(env, capsys):
    assert app.main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_board_group_task_flow_without_remote(env, capsys):
    code, body = _run(capsys, "board", "create", "Client A", "-d", "first")
    assert code == 0
    assert body["status"] == "OK"
    assert body["payload"]["sync"]["local_only"] is True
    board_id = body["payload"]["entity"]["id"]

    code, body = _run(capsys, "group", "create", board_id, "Launch", "--color", "#ABCDEF")
    group_id = body["payload"]["entity"]["id"]

    code, body = _run(capsys, "task", "create", group_id, "Logo", "--status", "working", "--value", "250")
    assert code == 0
    task = body["payload"]["entity"]
    assert task["status"] == "EM ANDAMENTO"
    assert task["value"] == 250.0

    code, body = _run(capsys, "task", "comment", task["id"], "looks good")
    assert body["payload"]["entity"]["text"] == "looks good"

    code, body = _run(capsys, "load")
    assert body["payload"]["boards"] == [
        {"id": board_id, "name": "Client A", "groups": [{"id": group_id, "name": "Launch", "tasks": 1}]}
    ]
    assert body["payload"]["profile"]["id"] == "1"


def test_unknown_task_is_structured_error(env, capsys):
    code, body = _run(capsys, "task", "update", "missing", "--title", "x")
    assert code == 1
    assert body["status"] == "ERROR"
    assert "missing" in body["message"]


def test_task_update_requires_fields(env, capsys):
    code, body = _run(capsys, "task", "update", "t-1")
    assert code == 1
    assert body["message"] == "Nothing to update"


def test_failed_remote_write_reports_degraded(env, capsys, monkeypatch):
    class DownRemote:
        def fetch_boards_deep(self):
            return []

        def fetch_user_profile(self, profile_id):
            return None

        def upsert_board(self, board):
            raise RemoteError("no route", code="NETWORK", category=RemoteErrorCategory.TRANSPORT)

    def build(settings=None, session=None):
        return SyncCoordinator(DownRemote(), JsonFileCache(settings.cache_dir), seed_on_empty=False)

    monkeypatch.setattr(runtime, "build_coordinator", build)
    code, body = _run(capsys, "board", "create", "Offline board")

    assert code == 0
    assert body["status"] == "DEGRADED"
    assert body["notices"][0]["classification"] == "Unreachable"
    assert JsonFileCache(env / "cache").read_boards()[0].name == "Offline board"


def test_status_json(env, capsys):
    code, body = _run(capsys, "status", "--json")
    assert code == 0
    assert body["payload"]["state"] == "cached_only"
    assert body["payload"]["local_only"] is True


def test_schema_uses_configured_profile_table(env, capsys):
    config.set_user_value("remote", "profile_table", "members")
    assert app.main(["schema"]) == 0
    sql = capsys.readouterr().out
    assert "create table if not exists public.boards" in sql
    assert "public.members" in sql


def test_auth_saves_and_clears_key(env, capsys):
    code, body = _run(capsys, "auth", "--key", "anon", "--url", "https://demo.supabase.co")
    assert code == 0
    assert body["payload"]["key"] == "***"
    assert config.load_settings().remote_configured is True

    code, _ = _run(capsys, "auth", "--unset")
    assert config.get_api_key() == ""


def test_cache_clear(env, capsys):
    _run(capsys, "board", "create", "Temp")
    code, body = _run(capsys, "cache", "clear")
    assert code == 0
    assert JsonFileCache(env / "cache").read_boards() == []
