"""Local durable cache for the board snapshot and the user profile.

Each entry is one JSON file under the cache directory, replaced atomically on
write. Read failures of any kind degrade to "nothing cached" so the caller
never sees a storage error.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, List, Optional

from core import Board, UserProfile, boards_from_dicts, boards_to_dicts, default_profile

logger = logging.getLogger("boardsync.cache")

BOARDS_KEY = "boards_snapshot_v1"
PROFILE_KEY = "user_profile_v1"


class JsonFileCache:
    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir)
        self._lock = Lock()

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def _read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return None
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
                logger.warning("Cache entry %s unreadable, treating as empty: %s", key, exc)
                return None

    def _write(self, key: str, data: Any) -> None:
        target = self._path(key)
        tmp_path: Optional[Path] = None
        with self._lock:
            try:
                self.cache_dir.mkdir(parents=True, exist_ok=True)
                with tempfile.NamedTemporaryFile(
                    mode="w",
                    encoding="utf-8",
                    delete=False,
                    dir=str(self.cache_dir),
                    prefix=f".{key}.",
                    suffix=".tmp",
                ) as tmp:
                    tmp_path = Path(tmp.name)
                    json.dump(data, tmp, ensure_ascii=False, indent=2)
                    tmp.flush()
                    os.fsync(tmp.fileno())
                os.replace(str(tmp_path), str(target))
            except (OSError, TypeError, ValueError) as exc:
                logger.warning("Cache write for %s failed: %s", key, exc)
            finally:
                if tmp_path and tmp_path.exists():
                    try:
                        tmp_path.unlink()
                    except OSError:
                        pass

    def has_boards(self) -> bool:
        return isinstance(self._read(BOARDS_KEY), list)

    def read_boards(self) -> List[Board]:
        raw = self._read(BOARDS_KEY)
        if raw is None:
            return []
        try:
            return boards_from_dicts(list(raw))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Cached board snapshot is corrupt, treating as empty: %s", exc)
            return []

    def write_boards(self, boards: List[Board]) -> None:
        self._write(BOARDS_KEY, boards_to_dicts(boards))

    def read_user_profile(self) -> UserProfile:
        raw = self._read(PROFILE_KEY)
        if raw is None:
            return default_profile()
        try:
            return UserProfile.from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Cached profile is corrupt, using default: %s", exc)
            return default_profile()

    def write_user_profile(self, profile: UserProfile) -> None:
        self._write(PROFILE_KEY, profile.to_dict())

    def clear(self) -> None:
        with self._lock:
            for key in (BOARDS_KEY, PROFILE_KEY):
                try:
                    self._path(key).unlink(missing_ok=True)
                except OSError as exc:
                    logger.warning("Unable to remove cache entry %s: %s", key, exc)
