"""Out-of-band error signal for remote sync failures."""

import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Dict, List

from .errors import SyncErrorKind

logger = logging.getLogger("boardsync.sync")


@dataclass(frozen=True)
class SyncNotice:
    kind: SyncErrorKind
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    remediation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classification": self.kind.value,
            "message": self.message,
            "context": dict(self.context),
            "remediation": self.remediation,
        }


NoticeListener = Callable[[SyncNotice], None]


class NoticeBus:
    """Broadcasts notices to every subscribed listener.

    A failing listener is logged and skipped so the others still get the notice.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._listeners: List[NoticeListener] = []

    def subscribe(self, listener: NoticeListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: NoticeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(self, notice: SyncNotice) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(notice)
            except Exception:
                logger.exception("Sync notice listener %r failed", listener)
