"""
BossRush Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── fake_backend: In-memory BackendService (auth + tables), records calls
    ├── test_client:  HTTPX AsyncClient against create_app(), with
    │                 get_backend overridden to return fake_backend
    └── registered_player: An account + profile + token inside fake_backend
"""

import os
import re
import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any bossrush import so the settings singleton never points at a
# real project.
os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENABLE_DOCS"] = "false"

from bossrush.exceptions import BackendError  # noqa: E402
from bossrush.services.backend_base import BackendService, Row  # noqa: E402

EMBED_PATTERN = re.compile(r"(\w+)\(([^)]*)\)")

INVALID_TOKEN_MESSAGE = "invalid JWT: unable to parse or verify signature, token is malformed"
SINGLE_ROW_MESSAGE = "JSON object requested, multiple (or no) rows returned"


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Backend
# ══════════════════════════════════════════════════════════════════════════

class InMemoryBackend(BackendService):
    """
    BackendService double holding accounts, tokens and tables in dicts.

    Behaves like Supabase where the router can observe it:
        - embedded selects (`*, users(username)`) join on `<singular>_id`
        - `single=True` fails unless exactly one row matches
        - rejected calls raise BackendError with Supabase-style messages

    Test helpers:
        calls:      Every capability call as (operation, *args)
        fail(...):  Make one operation (optionally on one table) fail
        add_identity(token, user_id): Accept `token` as identifying `user_id`
    """

    def __init__(self):
        self.tables: Dict[str, List[Row]] = {"users": [], "scores": [], "bosses": []}
        self.accounts: Dict[str, Dict[str, str]] = {}
        self.tokens: Dict[str, str] = {}
        self.calls: List[Tuple[Any, ...]] = []
        self.failures: Dict[str, str] = {}

    # ── Helpers ───────────────────────────────────────────────────────────

    def fail(self, operation: str, message: str, table: Optional[str] = None) -> None:
        key = f"{operation}:{table}" if table else operation
        self.failures[key] = message

    def add_identity(self, token: str, user_id: str, email: str = "player@example.com") -> None:
        self.accounts.setdefault(email, {"id": user_id, "email": email, "password": "secret"})
        self.tokens[token] = user_id

    def operations(self) -> List[str]:
        return [call[0] for call in self.calls]

    def _record(self, operation: str, *args: Any, table: Optional[str] = None) -> None:
        self.calls.append((operation, *args))
        for key in (f"{operation}:{table}", operation):
            if key in self.failures:
                raise BackendError(self.failures[key])

    def _account_by_id(self, user_id: str) -> Dict[str, str]:
        for account in self.accounts.values():
            if account["id"] == user_id:
                return account
        return {"id": user_id, "email": ""}

    # ── Auth ──────────────────────────────────────────────────────────────

    async def sign_up(self, email: str, password: str) -> Row:
        self._record("sign_up", email)
        if email in self.accounts:
            raise BackendError("User already registered", status_code=422)
        account = {"id": str(uuid.uuid4()), "email": email, "password": password}
        self.accounts[email] = account
        return {"id": account["id"], "email": email, "role": "authenticated"}

    async def sign_in_with_password(self, email: str, password: str) -> Row:
        self._record("sign_in_with_password", email)
        account = self.accounts.get(email)
        if account is None or account["password"] != password:
            raise BackendError("Invalid login credentials", status_code=400)
        token = f"token-{account['id']}"
        self.tokens[token] = account["id"]
        user = {"id": account["id"], "email": email, "role": "authenticated"}
        return {
            "user": user,
            "session": {
                "access_token": token,
                "token_type": "bearer",
                "expires_in": 3600,
                "refresh_token": "refresh-" + account["id"],
                "user": user,
            },
        }

    async def get_user(self, token: str) -> Row:
        self._record("get_user", token)
        if not token:
            raise BackendError("Auth session missing!")
        user_id = self.tokens.get(token)
        if user_id is None:
            raise BackendError(INVALID_TOKEN_MESSAGE, status_code=403)
        account = self._account_by_id(user_id)
        return {"id": user_id, "email": account["email"], "role": "authenticated"}

    # ── Storage ───────────────────────────────────────────────────────────

    def _matching(self, table: str, filters: Optional[Dict[str, Any]]) -> List[Row]:
        return [
            row for row in self.tables.setdefault(table, [])
            if all(row.get(column) == value for column, value in (filters or {}).items())
        ]

    def _embed(self, row: Row, columns: str) -> Row:
        result = dict(row)
        for name, wanted in EMBED_PATTERN.findall(columns):
            foreign_key = f"{name.rstrip('s')}_id"
            related = next(
                (r for r in self.tables.get(name, []) if r.get("id") == row.get(foreign_key)),
                None,
            )
            fields = [c.strip() for c in wanted.split(",") if c.strip()]
            result[name] = {c: related.get(c) for c in fields} if related else None
        return result

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
        self._record("select", table, filters, table=table)
        rows = self._matching(table, filters)
        if order:
            rows = sorted(rows, key=lambda r: r[order], reverse=not ascending)
        if limit is not None:
            rows = rows[:limit]
        rows = [self._embed(row, columns) for row in rows]
        if single:
            if len(rows) != 1:
                raise BackendError(SINGLE_ROW_MESSAGE, status_code=406, code="PGRST116")
            return rows[0]
        return rows

    async def insert(self, table: str, record: Row) -> None:
        self._record("insert", table, record, table=table)
        self.tables.setdefault(table, []).append(dict(record))

    async def update(self, table: str, fields: Row, filters: Dict[str, Any]) -> None:
        self._record("update", table, fields, filters, table=table)
        for row in self._matching(table, filters):
            row.update(fields)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_backend():
    """A fresh, empty in-memory backend."""
    return InMemoryBackend()


@pytest.fixture
def registered_player(fake_backend):
    """
    Account + profile row + valid bearer token for one player.

    Returns:
        dict with `id`, `token` and the profile fields.
    """
    user_id = "7d1f1a52-9c1c-4d7e-9d3a-1f0b3c2a9e10"
    token = "valid-token"
    fake_backend.add_identity(token, user_id, email="alice@example.com")
    profile = {"id": user_id, "username": "alice", "level": 3, "experience": 120}
    fake_backend.tables["users"].append(dict(profile))
    return {**profile, "token": token}


@pytest_asyncio.fixture
async def test_client(fake_backend):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient talking to a fresh app from create_app().
    How:     ASGITransport routes requests directly to the app; the
             per-request backend dependency returns `fake_backend`.

    Usage:
        async def test_bosses(test_client):
            response = await test_client.get("/api/bosses")
            assert response.status_code == 200
    """
    from bossrush.dependencies import get_backend
    from bossrush.main import create_app

    app = create_app()

    async def override_get_backend():
        yield fake_backend

    app.dependency_overrides[get_backend] = override_get_backend

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
