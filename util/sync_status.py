from typing import Any, Dict, List, Tuple


def sync_status_fragments(snapshot: Dict[str, Any], flash: bool = False) -> List[Tuple[str, str]]:
    """Unified status label for remote sync (prompt_toolkit style fragments)."""
    entries: List[Tuple[str, str]] = []
    if flash:
        entries.append(("class:icon.warn", "Remote ■"))

    state = snapshot.get("state") or "unknown"
    local_only = bool(snapshot.get("local_only"))
    has_issue = bool(snapshot.get("status_reason")) and not local_only
    synced = state == "synced" and not has_issue

    label = "Remote ■" if synced else "Remote □"
    if local_only:
        label = f"{label} local-only"
    elif has_issue:
        label = f"{label} ! {snapshot['status_reason']}"
    elif snapshot.get("last_pull") or snapshot.get("last_push"):
        lp = snapshot.get("last_pull") or "—"
        lpsh = snapshot.get("last_push") or "—"
        label = f"{label} pull={lp} push={lpsh}"
    pending = int(snapshot.get("pending") or 0)
    if pending:
        label = f"{label} pending={pending}"

    style = "class:status.fail" if has_issue else ("class:icon.check" if synced else "class:text.dim")
    entries.append((style, label))
    return entries


__all__ = ["sync_status_fragments"]
