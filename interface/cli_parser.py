"""CLI parser construction for boardsync."""

import argparse
from typing import Any

from core import TaskPriority, TaskStatus, UserRole

STATUS_CHOICES = [s.name for s in TaskStatus]
PRIORITY_CHOICES = [p.name for p in TaskPriority]
ROLE_CHOICES = [r.name for r in UserRole]


def _add_task_fields(sp: argparse.ArgumentParser) -> argparse.ArgumentParser:
    sp.add_argument("--description", "-d")
    sp.add_argument("--status", type=str.upper, choices=STATUS_CHOICES)
    sp.add_argument("--priority", type=str.upper, choices=PRIORITY_CHOICES)
    sp.add_argument("--value", type=float, help="monetary value (non-negative)")
    sp.add_argument("--owner", dest="owner_id")
    sp.add_argument("--client-name")
    sp.add_argument("--client-phone")
    sp.add_argument("--client-avatar", help="data URI or URL")
    sp.add_argument("--client-idea")
    sp.add_argument("--client-request")
    sp.add_argument("--start-date", help="YYYY-MM-DD")
    sp.add_argument("--end-date", help="YYYY-MM-DD")
    return sp


def build_parser(commands: Any) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boardsync",
        description="boardsync: boards and tasks with remote sync and a local cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    parser.add_argument("--local-only", action="store_true", help="skip the remote store for this run")
    parser.add_argument("--flush-timeout", type=float, default=30.0, help="seconds to wait for remote writes")
    sub = parser.add_subparsers(dest="command")

    lp = sub.add_parser("load", help="Load boards and profile (remote first, cache fallback)")
    lp.set_defaults(func=commands.cmd_load)

    st = sub.add_parser("status", help="Show the remote sync indicator")
    st.add_argument("--json", action="store_true", help="structured output instead of the status line")
    st.set_defaults(func=commands.cmd_status)

    sc = sub.add_parser("schema", help="Print the SQL that initializes the remote tables")
    sc.set_defaults(func=commands.cmd_schema)

    auth = sub.add_parser("auth", help="Save or clear the remote API key")
    auth.add_argument("--key")
    auth.add_argument("--url")
    auth.add_argument("--unset", action="store_true")
    auth.set_defaults(func=commands.cmd_auth)

    cache = sub.add_parser("cache", help="Local cache maintenance")
    cache_sub = cache.add_subparsers(dest="cache_command")
    cc = cache_sub.add_parser("clear", help="Drop the cached snapshot and profile")
    cc.set_defaults(func=commands.cmd_cache_clear)

    board = sub.add_parser("board", help="Board operations")
    board_sub = board.add_subparsers(dest="board_command")
    bc = board_sub.add_parser("create")
    bc.add_argument("name")
    bc.add_argument("--description", "-d", default="")
    bc.add_argument("--members", help="comma separated user ids")
    bc.set_defaults(func=commands.cmd_board_create)
    br = board_sub.add_parser("rename")
    br.add_argument("board_id")
    br.add_argument("name")
    br.add_argument("--description", "-d")
    br.set_defaults(func=commands.cmd_board_rename)
    bd = board_sub.add_parser("delete")
    bd.add_argument("board_id")
    bd.set_defaults(func=commands.cmd_board_delete)

    group = sub.add_parser("group", help="Group operations")
    group_sub = group.add_subparsers(dest="group_command")
    gc = group_sub.add_parser("create")
    gc.add_argument("board_id")
    gc.add_argument("name")
    gc.add_argument("--color")
    gc.set_defaults(func=commands.cmd_group_create)
    gu = group_sub.add_parser("update")
    gu.add_argument("group_id")
    gu.add_argument("--name")
    gu.add_argument("--color")
    gu.set_defaults(func=commands.cmd_group_update)
    gd = group_sub.add_parser("delete")
    gd.add_argument("group_id")
    gd.set_defaults(func=commands.cmd_group_delete)

    task = sub.add_parser("task", help="Task operations")
    task_sub = task.add_subparsers(dest="task_command")
    tc = _add_task_fields(task_sub.add_parser("create"))
    tc.add_argument("group_id")
    tc.add_argument("title")
    tc.set_defaults(func=commands.cmd_task_create)
    tu = _add_task_fields(task_sub.add_parser("update"))
    tu.add_argument("task_id")
    tu.add_argument("--title")
    tu.add_argument("--group", dest="group_id", help="move to another group")
    tu.set_defaults(func=commands.cmd_task_update)
    tm = task_sub.add_parser("comment")
    tm.add_argument("task_id")
    tm.add_argument("text")
    tm.set_defaults(func=commands.cmd_task_comment)
    td = task_sub.add_parser("delete")
    td.add_argument("task_id")
    td.set_defaults(func=commands.cmd_task_delete)

    profile = sub.add_parser("profile", help="User profile")
    profile_sub = profile.add_subparsers(dest="profile_command")
    pu = profile_sub.add_parser("update")
    pu.add_argument("--name")
    pu.add_argument("--email")
    pu.add_argument("--avatar")
    pu.add_argument("--role", type=str.upper, choices=ROLE_CHOICES)
    pu.set_defaults(func=commands.cmd_profile_update)

    return parser
