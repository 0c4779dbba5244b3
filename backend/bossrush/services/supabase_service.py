"""
BossRush Backend — Supabase Service Implementation
=====================================================

What:  Concrete BackendService speaking the Supabase REST API over httpx.
How:   Auth calls go to GoTrue (`/auth/v1/...`), table calls go to PostgREST
       (`/rest/v1/<table>`). Every non-2xx answer and every transport failure
       becomes a BackendError carrying the backend's own message.
Who:   Constructed once per request by `bossrush.dependencies.get_backend`,
       around an httpx.AsyncClient that lives exactly as long as the request.
When:  Called by GameService, at most twice per request.

Wire summary:
    sign_up                POST  /auth/v1/signup
    sign_in_with_password  POST  /auth/v1/token?grant_type=password
    get_user               GET   /auth/v1/user            (Bearer <user token>)
    select                 GET   /rest/v1/<table>?select=..&col=eq.v&order=..&limit=..
    insert                 POST  /rest/v1/<table>         (Prefer: return=minimal)
    update                 PATCH /rest/v1/<table>?col=eq.v (Prefer: return=minimal)

    Every call carries `apikey: <anon key>`. Calls not made on behalf of a
    user token authenticate as the anon role (`Authorization: Bearer <anon key>`).

Not implemented:
    - retries / backoff (a failed call is terminal for the request)
    - caching of identities or rows
    - connection pooling across requests
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from bossrush.exceptions import BackendError
from bossrush.services.backend_base import BackendService, Row

logger = logging.getLogger(__name__)

# Keys GoTrue and PostgREST use for the human-readable part of an error body,
# in the order they are preferred.
ERROR_MESSAGE_KEYS = ("msg", "message", "error_description", "error")

# PostgREST answers a single object (or 406) instead of an array
SINGLE_OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"

MISSING_SESSION_MESSAGE = "Auth session missing!"


def error_from_response(response: httpx.Response) -> BackendError:
    """
    Build a BackendError from a non-2xx Supabase response.

    GoTrue errors look like `{"code": 400, "error_code": "...", "msg": "..."}`
    (older releases: `{"error": "...", "error_description": "..."}`);
    PostgREST errors look like `{"code": "PGRST116", "message": "...", ...}`.
    Bodies that are not JSON objects fall back to the reason phrase.
    """
    message = None
    code = None
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ERROR_MESSAGE_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value:
                message = value
                break
        raw_code = body.get("error_code") or body.get("code")
        if raw_code is not None:
            code = str(raw_code)

    if not message:
        message = response.reason_phrase or f"Request failed with status {response.status_code}"

    return BackendError(message=message, status_code=response.status_code, code=code)


def format_filter_value(value: Any) -> str:
    """Render a Python value as a PostgREST `eq.` operand."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SupabaseService(BackendService):
    """
    Supabase REST client bound to one request.

    Attributes:
        client:   httpx.AsyncClient owned by the caller (closed by it)
        url:      Project URL without trailing slash
        anon_key: Public API key
    """

    def __init__(self, client: httpx.AsyncClient, url: str, anon_key: str):
        self.client = client
        self.url = url.rstrip("/")
        self.anon_key = anon_key

    # ── Transport ─────────────────────────────────────────────────────────

    def _headers(self, token: Optional[str] = None, **extra: str) -> Dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token or self.anon_key}",
        }
        headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[List[Tuple[str, str]]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """
        Perform one backend call.

        Raises:
            BackendError: Transport failure (no response at all) or a
                non-2xx response.
        """
        start_time = time.perf_counter()
        try:
            response = await self.client.request(
                method,
                f"{self.url}{path}",
                params=params,
                json=json,
                headers=headers if headers is not None else self._headers(),
            )
        except httpx.RequestError as e:
            logger.warning("Backend %s %s failed: %s", method, path, str(e))
            raise BackendError(message=str(e) or type(e).__name__) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "Backend %s %s -> %d in %.0fms",
            method,
            path,
            response.status_code,
            duration_ms,
        )

        if response.is_error:
            raise error_from_response(response)
        return response

    # ── Auth ──────────────────────────────────────────────────────────────

    async def sign_up(self, email: str, password: str) -> Row:
        response = await self._send(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password},
        )
        data = response.json()
        # With email auto-confirm on, GoTrue answers a full session that
        # wraps the user; otherwise the body is the user itself.
        if isinstance(data, dict) and "access_token" in data:
            return data.get("user") or {}
        return data

    async def sign_in_with_password(self, email: str, password: str) -> Row:
        response = await self._send(
            "POST",
            "/auth/v1/token",
            params=[("grant_type", "password")],
            json={"email": email, "password": password},
        )
        session = response.json()
        return {"user": session.get("user"), "session": session}

    async def get_user(self, token: str) -> Row:
        if not token:
            raise BackendError(message=MISSING_SESSION_MESSAGE)
        response = await self._send(
            "GET",
            "/auth/v1/user",
            headers=self._headers(token=token),
        )
        return response.json()

    # ── Storage ───────────────────────────────────────────────────────────

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
        single: bool = False,
    ) -> Union[List[Row], Row]:
        # PostgREST rejects whitespace inside the select list
        params: List[Tuple[str, str]] = [("select", "".join(columns.split()))]
        for column, value in (filters or {}).items():
            params.append((column, f"eq.{format_filter_value(value)}"))
        if order:
            params.append(("order", f"{order}.{'asc' if ascending else 'desc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))

        headers = self._headers()
        if single:
            headers["Accept"] = SINGLE_OBJECT_MEDIA_TYPE

        response = await self._send("GET", f"/rest/v1/{table}", params=params, headers=headers)
        return response.json()

    async def insert(self, table: str, record: Row) -> None:
        await self._send(
            "POST",
            f"/rest/v1/{table}",
            json=record,
            headers=self._headers(Prefer="return=minimal"),
        )

    async def update(self, table: str, fields: Row, filters: Dict[str, Any]) -> None:
        params = [
            (column, f"eq.{format_filter_value(value)}")
            for column, value in filters.items()
        ]
        await self._send(
            "PATCH",
            f"/rest/v1/{table}",
            params=params,
            json=fields,
            headers=self._headers(Prefer="return=minimal"),
        )
