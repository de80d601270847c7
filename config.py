from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

USER_CONFIG_PATH = Path(os.environ.get("BOARDSYNC_CONFIG") or Path.home() / ".boardsync_config.yaml")
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "boardsync"


@dataclass
class SyncSettings:
    supabase_url: str = ""
    supabase_key: str = ""
    cache_dir: Path = DEFAULT_CACHE_DIR
    profile_table: str = "profiles"
    profile_id: str = "1"
    timeout: int = 30
    max_attempts: int = 3
    workers: int = 1
    seed_on_empty: bool = True
    local_only: bool = False

    @property
    def remote_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def _load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    target = path or USER_CONFIG_PATH
    if not target.exists():
        return {}
    try:
        data = yaml.safe_load(target.read_text()) or {}
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _save_config(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    target = path or USER_CONFIG_PATH
    if not data:
        if target.exists():
            target.unlink()
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def _as_int(value: Any, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        token = value.strip().lower()
        if token in ("1", "true", "yes", "on"):
            return True
        if token in ("0", "false", "no", "off"):
            return False
    return default


def load_settings(path: Optional[Path] = None) -> SyncSettings:
    """Merge the YAML user config with BOARDSYNC_* environment overrides."""
    data = _load_config(path)
    remote = data.get("remote") if isinstance(data.get("remote"), dict) else {}
    sync = data.get("sync") if isinstance(data.get("sync"), dict) else {}
    defaults = SyncSettings()

    url = os.getenv("BOARDSYNC_SUPABASE_URL") or remote.get("url") or ""
    key = os.getenv("BOARDSYNC_SUPABASE_KEY") or remote.get("key") or ""
    cache_dir = os.getenv("BOARDSYNC_CACHE_DIR") or data.get("cache_dir")
    return SyncSettings(
        supabase_url=str(url).rstrip("/"),
        supabase_key=str(key).strip(),
        cache_dir=Path(cache_dir).expanduser() if cache_dir else defaults.cache_dir,
        profile_table=str(remote.get("profile_table") or defaults.profile_table),
        profile_id=str(sync.get("profile_id") or defaults.profile_id),
        timeout=_as_int(remote.get("timeout"), defaults.timeout),
        max_attempts=_as_int(remote.get("max_attempts"), defaults.max_attempts),
        workers=_as_int(sync.get("workers"), defaults.workers),
        seed_on_empty=_as_bool(sync.get("seed_on_empty"), defaults.seed_on_empty),
        local_only=_as_bool(os.getenv("BOARDSYNC_LOCAL_ONLY") or sync.get("local_only"), defaults.local_only),
    )


def get_api_key() -> str:
    remote = _load_config().get("remote") or {}
    return str(remote.get("key") or "")


def set_api_key(value: str) -> None:
    set_user_value("remote", "key", value)


def set_user_value(section: str, key: str, value: Any) -> None:
    data = _load_config()
    bucket = data.get(section) if isinstance(data.get(section), dict) else {}
    if isinstance(value, str):
        value = value.strip()
    if value in ("", None):
        bucket.pop(key, None)
    else:
        bucket[key] = value
    if bucket:
        data[section] = bucket
    else:
        data.pop(section, None)
    _save_config(data)
