import json
from typing import Any, Dict, Iterable, Optional

from application.notices import SyncNotice
from core import utc_now_iso


def structured_response(
    command: str,
    *,
    status: str = "OK",
    message: str = "",
    payload: Optional[Dict[str, Any]] = None,
    notices: Iterable[SyncNotice] = (),
    exit_code: int = 0,
) -> int:
    """Print the JSON envelope shared by every boardsync command.

    Remote failures absorbed by the local cache travel in ``notices``; their
    presence turns an OK status into DEGRADED without changing the exit code.
    """
    notice_list = [n.to_dict() for n in notices]
    if notice_list and status == "OK":
        status = "DEGRADED"
    body: Dict[str, Any] = {
        "command": command,
        "status": status,
        "message": message,
        "timestamp": utc_now_iso(),
        "payload": payload or {},
    }
    if notice_list:
        body["notices"] = notice_list
    print(json.dumps(body, ensure_ascii=False, indent=2))
    return exit_code


def structured_error(command: str, message: str, *, payload: Optional[Dict[str, Any]] = None) -> int:
    return structured_response(command, status="ERROR", message=message, payload=payload, exit_code=1)


__all__ = ["structured_response", "structured_error"]
