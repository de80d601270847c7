"""Sync coordinator: the single entry point for persistence-affecting actions.

Reads prefer the remote store and fall back to the local cache. Writes land in
memory and in the cache before returning; the remote upsert/delete runs on a
background worker and reports failure through the notice bus only.
"""

import copy
import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, replace
from datetime import date, datetime
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from core import (
    Board,
    Comment,
    Task,
    TaskGroup,
    TaskPriority,
    TaskStatus,
    UserProfile,
    UserRole,
    DEFAULT_GROUP_COLOR,
    DEFAULT_PROFILE_ID,
    default_profile,
    find_board,
    find_group,
    find_task,
    new_id,
    parse_value,
    seed_boards,
    utc_now_iso,
)

from .errors import classify, remediation_for
from .notices import NoticeBus, NoticeListener, SyncNotice
from .ports import BoardCache, RemoteRepository
from .sync_state import (
    BOARDS_KEY,
    PROFILE_KEY,
    SyncState,
    SyncStateTracker,
    board_key,
    group_key,
    task_key,
)

logger = logging.getLogger("boardsync.sync")

TASK_TEXT_FIELDS = frozenset(
    {
        "title",
        "description",
        "client_name",
        "client_phone",
        "client_avatar",
        "client_idea",
        "client_request",
        "owner_id",
    }
)
TASK_DATE_FIELDS = frozenset({"start_date", "end_date"})
TASK_FIELDS = TASK_TEXT_FIELDS | TASK_DATE_FIELDS | {"value", "status", "priority", "group_id"}
GROUP_FIELDS = frozenset({"name", "color"})
PROFILE_FIELDS = frozenset({"name", "email", "avatar", "role"})


@dataclass
class LoadResult:
    boards: List[Board]
    profile: UserProfile


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M")


def _reject_unknown(kind: str, fields: Dict[str, Any], allowed: Iterable[str]) -> None:
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise ValueError(f"Unknown {kind} field(s): {', '.join(unknown)}")


def _require_text(label: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{label} must be a non-empty string")
    return value.strip()


def _coerce_date(name: str, value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    try:
        return date.fromisoformat(str(value)).isoformat()
    except ValueError as exc:
        raise ValueError(f"Invalid {name}: {value!r}") from exc


def coerce_task_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a partial task update; enumerations and value are closed."""
    _reject_unknown("task", fields, TASK_FIELDS)
    clean: Dict[str, Any] = {}
    for name, value in fields.items():
        if name == "status":
            clean[name] = TaskStatus.from_string(value)
        elif name == "priority":
            clean[name] = TaskPriority.from_string(value)
        elif name == "value":
            clean[name] = parse_value(value)
        elif name in TASK_DATE_FIELDS:
            clean[name] = _coerce_date(name, value)
        elif name == "group_id":
            clean[name] = _require_text("group_id", value)
        elif name == "title":
            clean[name] = _require_text("title", value)
        else:
            clean[name] = "" if value is None else str(value)
    return clean


def validate_task(task: Task) -> None:
    if not isinstance(task.status, TaskStatus):
        raise ValueError(f"Invalid task status: {task.status!r}")
    if not isinstance(task.priority, TaskPriority):
        raise ValueError(f"Invalid task priority: {task.priority!r}")
    parse_value(task.value)


class SyncCoordinator:
    def __init__(
        self,
        remote: RemoteRepository,
        cache: BoardCache,
        *,
        executor: Optional[ThreadPoolExecutor] = None,
        workers: int = 1,
        seed_on_empty: bool = True,
        profile_id: str = DEFAULT_PROFILE_ID,
        local_only: bool = False,
    ) -> None:
        self.remote = remote
        self.cache = cache
        self.seed_on_empty = seed_on_empty
        self.profile_id = profile_id
        self.local_only = local_only
        self.states = SyncStateTracker()
        self.notices = NoticeBus()
        self.last_pull: Optional[str] = None
        self.last_push: Optional[str] = None
        self.last_notice: Optional[SyncNotice] = None
        self.status_reason: Optional[str] = None
        self._executor = executor
        self._owns_executor = executor is None
        self._workers = max(1, workers)
        self._lock = RLock()
        self._boards: List[Board] = []
        self._profile: UserProfile = default_profile()
        self._pending: Set[Future] = set()
        self._fetch_seq = 0
        self._applied_seq = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> "SyncCoordinator":
        with self._lock:
            if self._closed:
                raise RuntimeError("SyncCoordinator is closed")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="boardsync")
        return self

    def close(self, timeout: Optional[float] = None) -> None:
        if self._closed:
            return
        self.flush(timeout)
        with self._lock:
            self._closed = True
            executor = self._executor
        if executor is not None and self._owns_executor:
            executor.shutdown(wait=True)
        closer = getattr(self.remote, "close", None)
        if callable(closer):
            closer()

    def __enter__(self) -> "SyncCoordinator":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for in-flight remote writes; True when none are left."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def subscribe(self, listener: NoticeListener) -> None:
        self.notices.subscribe(listener)

    def unsubscribe(self, listener: NoticeListener) -> None:
        self.notices.unsubscribe(listener)

    @property
    def boards(self) -> List[Board]:
        with self._lock:
            return list(self._boards)

    @property
    def profile(self) -> UserProfile:
        with self._lock:
            return self._profile

    def state_of(self, key: str) -> SyncState:
        return self.states.get(key)

    def status_snapshot(self) -> Dict[str, Any]:
        with self._lock:
            pending = sum(1 for f in self._pending if not f.done())
        return {
            "state": self.states.get(BOARDS_KEY).value,
            "status_reason": self.status_reason or "",
            "last_pull": self.last_pull,
            "last_push": self.last_push,
            "pending": pending,
            "local_only": self.local_only,
        }

    def set_local_only(self, enabled: bool) -> None:
        self.local_only = bool(enabled)
        if self.local_only:
            self.status_reason = "local-only mode"
        logger.info("Local-only mode %s", "enabled" if self.local_only else "disabled")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def load_all(self) -> LoadResult:
        with self._lock:
            self._fetch_seq += 1
            seq = self._fetch_seq
        boards = self._load_boards(seq)
        profile = self._load_profile()
        return LoadResult(boards=boards, profile=profile)

    def reconnect(self) -> LoadResult:
        logger.info("Reconnecting to remote store")
        if self.local_only:
            self.set_local_only(False)
        return self.load_all()

    def _load_boards(self, seq: int) -> List[Board]:
        if self.local_only:
            return self._apply_cached_boards(seq)
        self.states.set(BOARDS_KEY, SyncState.SYNCING)
        had_cache = self.cache.has_boards()
        try:
            fetched = self.remote.fetch_boards_deep()
        except Exception as exc:
            kind = classify(exc)
            logger.warning("Board fetch failed (%s), using local cache: %s", kind.value, exc)
            self.status_reason = f"{kind.value}: {exc}"
            return self._apply_cached_boards(seq)

        seeded = False
        if not fetched and not had_cache and self.seed_on_empty:
            logger.info("Remote store is empty and nothing is cached; using the seed board")
            fetched = seed_boards()
            seeded = True
        with self._lock:
            if seq < self._applied_seq:
                logger.debug("Discarding stale board fetch #%s (applied #%s)", seq, self._applied_seq)
                return list(self._boards)
            self._applied_seq = seq
            self._boards = list(fetched)
            self.cache.write_boards(self._boards)
            self._reset_entity_states(SyncState.CACHED_ONLY if seeded else SyncState.SYNCED)
        self.states.set(BOARDS_KEY, SyncState.SYNCED)
        self.last_pull = _timestamp()
        self.status_reason = None
        return self.boards

    def _apply_cached_boards(self, seq: int) -> List[Board]:
        cached = self.cache.read_boards()
        with self._lock:
            if seq < self._applied_seq:
                return list(self._boards)
            self._applied_seq = seq
            self._boards = cached
            self._reset_entity_states(SyncState.CACHED_ONLY)
        self.states.set(BOARDS_KEY, SyncState.CACHED_ONLY)
        return self.boards

    def _reset_entity_states(self, state: SyncState) -> None:
        for prefix in ("board:", "group:", "task:"):
            for key in self.states.snapshot(prefix):
                self.states.forget(key)
        for board in self._boards:
            self.states.set(board_key(board.id), state)
            for group in board.groups:
                self.states.set(group_key(group.id), state)
                for task in group.tasks:
                    self.states.set(task_key(task.id), state)

    def _load_profile(self) -> UserProfile:
        profile: Optional[UserProfile] = None
        if not self.local_only:
            self.states.set(PROFILE_KEY, SyncState.SYNCING)
            try:
                profile = self.remote.fetch_user_profile(self.profile_id)
            except Exception as exc:
                logger.warning("Profile fetch failed (%s), using local cache: %s", classify(exc).value, exc)
        if profile is not None:
            self.cache.write_user_profile(profile)
            self.states.set(PROFILE_KEY, SyncState.SYNCED)
        else:
            profile = self.cache.read_user_profile()
            self.states.set(PROFILE_KEY, SyncState.CACHED_ONLY)
        with self._lock:
            self._profile = profile
        return profile

    # ------------------------------------------------------------------
    # Boards
    # ------------------------------------------------------------------

    def create_board(self, name: str, description: str = "", members: Optional[List[str]] = None) -> Board:
        name = _require_text("Board name", name)
        with self._lock:
            board = Board(
                id=new_id("board"),
                name=name,
                description=description or "",
                members=[str(m) for m in members] if members else [self._profile.id],
                created_at=utc_now_iso(),
            )
            self._boards.append(board)
            self._persist_boards()
            self._push_board(board)
        return board

    def rename_board(self, board_id: str, name: str, description: Optional[str] = None) -> Board:
        name = _require_text("Board name", name)
        with self._lock:
            board = self._board(board_id)
            board.name = name
            if description is not None:
                board.description = description
            self._persist_boards()
            self._push_board(board)
        return board

    def delete_board(self, board_id: str) -> Board:
        with self._lock:
            board = self._board(board_id)
            self._boards.remove(board)
            self._persist_boards()
            for group in board.groups:
                self._forget_group_states(group)
            self._submit(board_key(board_id), "delete_board", {"board_id": board_id}, lambda: self.remote.delete_board(board_id))
        return board

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def create_group(self, board_id: str, name: str, color: Optional[str] = None) -> TaskGroup:
        name = _require_text("Group name", name)
        with self._lock:
            board = self._board(board_id)
            group = TaskGroup(
                id=new_id("group"),
                board_id=board.id,
                name=name,
                color=color or DEFAULT_GROUP_COLOR,
                created_at=utc_now_iso(),
            )
            board.groups.append(group)
            self._persist_boards()
            self._push_group(group)
        return group

    def update_group(self, group_id: str, fields: Dict[str, Any]) -> TaskGroup:
        _reject_unknown("group", fields, GROUP_FIELDS)
        clean: Dict[str, str] = {}
        if "name" in fields:
            clean["name"] = _require_text("Group name", fields["name"])
        if "color" in fields:
            clean["color"] = str(fields["color"] or DEFAULT_GROUP_COLOR)
        with self._lock:
            _, group = self._group(group_id)
            for name, value in clean.items():
                setattr(group, name, value)
            self._persist_boards()
            self._push_group(group)
        return group

    def delete_group(self, group_id: str) -> TaskGroup:
        with self._lock:
            board, group = self._group(group_id)
            board.groups.remove(group)
            self._persist_boards()
            self._forget_group_states(group, keep_self=True)
            self._submit(group_key(group_id), "delete_group", {"group_id": group_id}, lambda: self.remote.delete_group(group_id))
        return group

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(self, group_id: str, title: str, **fields: Any) -> Task:
        clean = coerce_task_fields(dict(fields, title=title))
        clean.pop("group_id", None)
        with self._lock:
            _, group = self._group(group_id)
            task = Task(
                id=new_id("task"),
                group_id=group.id,
                title=clean.pop("title"),
                owner_id=self._profile.id,
                created_at=utc_now_iso(),
            )
            for name, value in clean.items():
                setattr(task, name, value)
            group.tasks.append(task)
            self._persist_boards()
            self._push_task(task)
        return task

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> Task:
        clean = coerce_task_fields(fields)
        with self._lock:
            _, group, task = self._task(task_id)
            target_id = clean.pop("group_id", None)
            target: Optional[TaskGroup] = None
            if target_id and target_id != group.id:
                _, target = self._group(target_id)
            for name, value in clean.items():
                setattr(task, name, value)
            validate_task(task)
            if target is not None:
                group.tasks.remove(task)
                task.group_id = target.id
                target.tasks.append(task)
            self._persist_boards()
            self._push_task(task)
        return task

    def add_comment(self, task_id: str, text: str, user_id: Optional[str] = None) -> Comment:
        text = _require_text("Comment", text)
        with self._lock:
            _, _, task = self._task(task_id)
            comment = Comment(
                id=new_id("comment"),
                user_id=user_id or self._profile.id,
                text=text,
                timestamp=utc_now_iso(),
            )
            task.comments.append(comment)
            self._persist_boards()
            self._push_task(task)
        return comment

    def delete_task(self, task_id: str) -> Task:
        with self._lock:
            _, group, task = self._task(task_id)
            group.tasks.remove(task)
            self._persist_boards()
            self._submit(task_key(task_id), "delete_task", {"task_id": task_id}, lambda: self.remote.delete_task(task_id))
        return task

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def update_profile(self, fields: Dict[str, Any]) -> UserProfile:
        _reject_unknown("profile", fields, PROFILE_FIELDS)
        clean: Dict[str, Any] = {}
        for name, value in fields.items():
            if name == "role":
                clean[name] = UserRole.from_string(value)
            elif name == "name":
                clean[name] = _require_text("Profile name", value)
            else:
                clean[name] = "" if value is None else str(value)
        with self._lock:
            profile = replace(self._profile, **clean)
            self._profile = profile
            self.cache.write_user_profile(profile)
            snapshot = copy.deepcopy(profile)
            self._submit(PROFILE_KEY, "upsert_profile", {"profile_id": profile.id}, lambda: self.remote.upsert_user_profile(snapshot))
        return profile

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _board(self, board_id: str) -> Board:
        board = find_board(self._boards, board_id)
        if board is None:
            raise KeyError(f"Unknown board: {board_id}")
        return board

    def _group(self, group_id: str):
        found = find_group(self._boards, group_id)
        if found is None:
            raise KeyError(f"Unknown group: {group_id}")
        return found

    def _task(self, task_id: str):
        found = find_task(self._boards, task_id)
        if found is None:
            raise KeyError(f"Unknown task: {task_id}")
        return found

    def _persist_boards(self) -> None:
        self.cache.write_boards(self._boards)

    def _forget_group_states(self, group: TaskGroup, keep_self: bool = False) -> None:
        if not keep_self:
            self.states.forget(group_key(group.id))
        for task in group.tasks:
            self.states.forget(task_key(task.id))

    def _push_board(self, board: Board) -> None:
        snapshot = copy.deepcopy(replace(board, groups=[]))
        self._submit(board_key(board.id), "upsert_board", {"board_id": board.id}, lambda: self.remote.upsert_board(snapshot))

    def _push_group(self, group: TaskGroup) -> None:
        snapshot = copy.deepcopy(replace(group, tasks=[]))
        self._submit(group_key(group.id), "upsert_group", {"group_id": group.id}, lambda: self.remote.upsert_group(snapshot))

    def _push_task(self, task: Task) -> None:
        validate_task(task)
        snapshot = copy.deepcopy(task)
        self._submit(task_key(task.id), "upsert_task", {"task_id": task.id}, lambda: self.remote.upsert_task(snapshot))

    def _submit(self, key: str, action: str, context: Dict[str, Any], call: Callable[[], None]) -> Optional[Future]:
        if self.local_only:
            self.states.set(key, SyncState.CACHED_ONLY)
            return None
        self.start()
        self.states.set(key, SyncState.SYNCING)

        def run() -> None:
            try:
                call()
            except Exception as exc:
                self._on_remote_failure(key, action, context, exc)
            else:
                self.states.set(key, SyncState.SYNCED)
                self.last_push = _timestamp()

        future = self._executor.submit(run)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard_pending)
        return future

    def _discard_pending(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _on_remote_failure(self, key: str, action: str, context: Dict[str, Any], exc: BaseException) -> None:
        kind = classify(exc)
        self.states.set(key, SyncState.CACHED_ONLY)
        notice = SyncNotice(
            kind=kind,
            message=str(exc),
            context=dict(context, action=action, resource=key, code=getattr(exc, "code", "")),
            remediation=remediation_for(kind),
        )
        logger.warning("Remote %s for %s failed (%s): %s", action, key, kind.value, exc)
        self.last_notice = notice
        self.status_reason = f"{kind.value}: {exc}"
        self.notices.publish(notice)
