#!/usr/bin/env python3
"""Command handlers for the boardsync CLI."""

import argparse
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Tuple

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText

from application.notices import SyncNotice
from application.sync_coordinator import SyncCoordinator
from config import load_settings, set_api_key, set_user_value
from core import Board
from infrastructure.local_cache import JsonFileCache
from infrastructure.remote import render_schema
from util.sync_status import sync_status_fragments

from . import runtime
from .cli_io import structured_error, structured_response
from .theme import build_style

TASK_ARG_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "value",
    "owner_id",
    "client_name",
    "client_phone",
    "client_avatar",
    "client_idea",
    "client_request",
    "start_date",
    "end_date",
    "group_id",
)


def _collect(args: argparse.Namespace, names: Iterable[str]) -> Dict[str, Any]:
    return {name: getattr(args, name) for name in names if getattr(args, name, None) is not None}


def _error_text(exc: Exception) -> str:
    return str(exc.args[0]) if isinstance(exc, KeyError) and exc.args else str(exc)


@contextmanager
def _session(args: argparse.Namespace) -> Iterator[Tuple[SyncCoordinator, List[SyncNotice]]]:
    settings = load_settings()
    if getattr(args, "local_only", False):
        settings.local_only = True
    coordinator = runtime.build_coordinator(settings)
    notices: List[SyncNotice] = []
    coordinator.subscribe(notices.append)
    with coordinator:
        coordinator.load_all()
        yield coordinator, notices


def _board_summary(board: Board) -> Dict[str, Any]:
    return {
        "id": board.id,
        "name": board.name,
        "groups": [{"id": g.id, "name": g.name, "tasks": len(g.tasks)} for g in board.groups],
    }


def _mutate(args: argparse.Namespace, command: str, action: Callable[[SyncCoordinator], Any]) -> int:
    try:
        with _session(args) as (coordinator, notices):
            entity = action(coordinator)
            coordinator.flush(args.flush_timeout)
            payload = {
                "entity": entity.to_dict() if hasattr(entity, "to_dict") else entity,
                "sync": coordinator.status_snapshot(),
            }
    except (KeyError, ValueError) as exc:
        return structured_error(command, _error_text(exc))
    message = "Saved locally; remote sync failed" if notices else "Saved"
    return structured_response(command, message=message, payload=payload, notices=notices)


def cmd_load(args: argparse.Namespace) -> int:
    with _session(args) as (coordinator, _):
        payload = {
            "boards": [_board_summary(b) for b in coordinator.boards],
            "profile": coordinator.profile.to_dict(),
            "sync": coordinator.status_snapshot(),
        }
    return structured_response("load", payload=payload)


def cmd_status(args: argparse.Namespace) -> int:
    with _session(args) as (coordinator, _):
        snapshot = coordinator.status_snapshot()
    if args.json:
        return structured_response("status", payload=snapshot)
    print_formatted_text(FormattedText(sync_status_fragments(snapshot)), style=build_style())
    return 0


def cmd_schema(args: argparse.Namespace) -> int:
    print(render_schema(load_settings().profile_table))
    return 0


def cmd_auth(args: argparse.Namespace) -> int:
    if args.unset:
        set_api_key("")
        return structured_response("auth", message="API key cleared", payload={"key": None})
    if not args.key and not args.url:
        return structured_error("auth", "Pass --key and/or --url, or --unset")
    if args.url:
        set_user_value("remote", "url", args.url)
    if args.key:
        set_api_key(args.key)
    return structured_response("auth", message="Remote settings saved", payload={"key": "***" if args.key else None, "url": args.url})


def cmd_cache_clear(args: argparse.Namespace) -> int:
    settings = load_settings()
    JsonFileCache(settings.cache_dir).clear()
    return structured_response("cache-clear", message="Local cache cleared", payload={"cache_dir": str(settings.cache_dir)})


def cmd_board_create(args: argparse.Namespace) -> int:
    members = [m.strip() for m in args.members.split(",") if m.strip()] if args.members else None
    return _mutate(args, "board-create", lambda c: c.create_board(args.name, args.description, members))


def cmd_board_rename(args: argparse.Namespace) -> int:
    return _mutate(args, "board-rename", lambda c: c.rename_board(args.board_id, args.name, args.description))


def cmd_board_delete(args: argparse.Namespace) -> int:
    return _mutate(args, "board-delete", lambda c: c.delete_board(args.board_id))


def cmd_group_create(args: argparse.Namespace) -> int:
    return _mutate(args, "group-create", lambda c: c.create_group(args.board_id, args.name, args.color))


def cmd_group_update(args: argparse.Namespace) -> int:
    fields = _collect(args, ("name", "color"))
    return _mutate(args, "group-update", lambda c: c.update_group(args.group_id, fields))


def cmd_group_delete(args: argparse.Namespace) -> int:
    return _mutate(args, "group-delete", lambda c: c.delete_group(args.group_id))


def cmd_task_create(args: argparse.Namespace) -> int:
    fields = _collect(args, TASK_ARG_FIELDS)
    fields.pop("group_id", None)
    title = fields.pop("title")
    return _mutate(args, "task-create", lambda c: c.create_task(args.group_id, title, **fields))


def cmd_task_update(args: argparse.Namespace) -> int:
    fields = _collect(args, TASK_ARG_FIELDS)
    if not fields:
        return structured_error("task-update", "Nothing to update")
    return _mutate(args, "task-update", lambda c: c.update_task(args.task_id, fields))


def cmd_task_comment(args: argparse.Namespace) -> int:
    return _mutate(args, "task-comment", lambda c: c.add_comment(args.task_id, args.text))


def cmd_task_delete(args: argparse.Namespace) -> int:
    return _mutate(args, "task-delete", lambda c: c.delete_task(args.task_id))


def cmd_profile_update(args: argparse.Namespace) -> int:
    fields = _collect(args, ("name", "email", "avatar", "role"))
    if not fields:
        return structured_error("profile-update", "Nothing to update")
    return _mutate(args, "profile-update", lambda c: c.update_profile(fields))
