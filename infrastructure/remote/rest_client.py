import logging
import random
import time
from enum import Enum
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger("boardsync.remote")

# PostgREST / Postgres codes that mean the tables (or their columns) are not there yet.
SCHEMA_MISSING_CODES = frozenset({"42P01", "42703", "PGRST200", "PGRST202", "PGRST204", "PGRST205"})
ACCESS_DENIED_CODES = frozenset({"42501", "PGRST301", "PGRST302"})
TRANSIENT_STATUSES = frozenset({429, 502, 503, 504})


class RemoteErrorCategory(Enum):
    SCHEMA_MISSING = "schema_missing"
    ACCESS_DENIED = "access_denied"
    TRANSPORT = "transport"
    OTHER = "other"


class RemoteError(RuntimeError):
    """Structured failure of a call to the store of record."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        category: RemoteErrorCategory = RemoteErrorCategory.OTHER,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.status = status

    def __repr__(self) -> str:
        return f"RemoteError(code={self.code!r}, category={self.category.value}, status={self.status}, message={self.message!r})"


def classify_response(status: int, code: str) -> RemoteErrorCategory:
    if code in SCHEMA_MISSING_CODES:
        return RemoteErrorCategory.SCHEMA_MISSING
    if code in ACCESS_DENIED_CODES or status in (401, 403):
        return RemoteErrorCategory.ACCESS_DENIED
    if status == 404:
        return RemoteErrorCategory.SCHEMA_MISSING
    if status in TRANSIENT_STATUSES:
        return RemoteErrorCategory.TRANSPORT
    return RemoteErrorCategory.OTHER


class RestClient:
    """Thin PostgREST transport over a requests session."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        max_attempts: int = 3,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)

    def _headers(self, prefer: Optional[str]) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def close(self) -> None:
        self.session.close()

    def table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def request(
        self,
        method: str,
        table: str,
        *,
        params: Optional[Dict[str, str]] = None,
        payload: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        if not self.base_url or not self.api_key:
            raise RemoteError(
                "Remote store is not configured (missing URL or key)",
                code="CONFIG",
                category=RemoteErrorCategory.ACCESS_DENIED,
            )
        url = self.table_url(table)
        headers = self._headers(prefer)
        attempt = 0
        delay = 1.0
        while True:
            attempt += 1
            try:
                response = self.session.request(
                    method.upper(), url, params=params, json=payload, headers=headers, timeout=self.timeout
                )
            except requests.RequestException as exc:
                if attempt >= self.max_attempts:
                    raise RemoteError(
                        f"Network error talking to {table}: {exc}",
                        code="NETWORK",
                        category=RemoteErrorCategory.TRANSPORT,
                    ) from exc
                logger.debug("%s %s failed (%s), retry #%s", method.upper(), table, exc, attempt)
                self._sleep(delay)
                delay *= 2
                continue
            if response.status_code in TRANSIENT_STATUSES and attempt < self.max_attempts:
                wait = self._retry_after(response.headers)
                if wait is None:
                    wait = delay
                logger.debug("%s %s -> HTTP %s, retry #%s", method.upper(), table, response.status_code, attempt)
                self._sleep(wait)
                delay *= 2
                continue
            if response.status_code >= 400:
                raise self._error_from_response(table, response)
            return self._decode(response)

    def _sleep(self, base_delay: float) -> None:
        time.sleep(base_delay + random.uniform(0, base_delay))

    @staticmethod
    def _retry_after(headers: Dict[str, Any]) -> Optional[float]:
        raw = headers.get("Retry-After") or headers.get("retry-after")
        if not raw:
            return None
        try:
            return max(0.0, float(raw))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _decode(response) -> Any:
        if response.status_code == 204 or not (response.text or "").strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(
                f"Invalid JSON from remote store: {exc}",
                code="DECODE",
                status=response.status_code,
            ) from exc

    @staticmethod
    def _error_from_response(table: str, response) -> RemoteError:
        code = ""
        message = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            code = str(body.get("code") or "")
            message = str(body.get("message") or body.get("msg") or "")
            hint = body.get("hint")
            if hint:
                message = f"{message} ({hint})"
        if not message:
            message = (response.text or "").strip() or f"HTTP {response.status_code}"
        return RemoteError(
            f"{table}: {message}",
            code=code or f"HTTP{response.status_code}",
            category=classify_response(response.status_code, code),
            status=response.status_code,
        )
