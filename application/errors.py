from enum import Enum

from infrastructure.remote.rest_client import RemoteError, RemoteErrorCategory


class SyncErrorKind(Enum):
    NOT_INITIALIZED = "NotInitialized"
    ACCESS_DENIED = "AccessDenied"
    UNREACHABLE = "Unreachable"
    UNKNOWN = "Unknown"


_BY_CATEGORY = {
    RemoteErrorCategory.SCHEMA_MISSING: SyncErrorKind.NOT_INITIALIZED,
    RemoteErrorCategory.ACCESS_DENIED: SyncErrorKind.ACCESS_DENIED,
    RemoteErrorCategory.TRANSPORT: SyncErrorKind.UNREACHABLE,
    RemoteErrorCategory.OTHER: SyncErrorKind.UNKNOWN,
}

REMEDIATIONS = {
    SyncErrorKind.NOT_INITIALIZED: "Remote tables are missing: run `boardsync schema` and apply the SQL to the database.",
    SyncErrorKind.ACCESS_DENIED: "Remote store rejected the request: check the API key and the row-level security policies.",
    SyncErrorKind.UNREACHABLE: "Remote store is unreachable: retry the connection or keep working in local-only mode.",
    SyncErrorKind.UNKNOWN: "Remote sync failed; the change is kept in the local cache only. Check the store, then reconnect and repeat the edit, since the next load from the store replaces the cache.",
}


def classify(exc: BaseException) -> SyncErrorKind:
    if isinstance(exc, RemoteError):
        return _BY_CATEGORY.get(exc.category, SyncErrorKind.UNKNOWN)
    return SyncErrorKind.UNKNOWN


def remediation_for(kind: SyncErrorKind) -> str:
    return REMEDIATIONS[kind]
