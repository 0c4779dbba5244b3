"""
BossRush Backend — Game Service (Business Logic Orchestrator)
===============================================================

What:  The seven operations behind the route table: scores, bosses,
       registration, login, profile read and experience update.
How:   Each method makes at most two backend calls and translates any
       BackendError into the application exception whose status code the
       operation calls for.
Who:   Called by route handlers; calls the per-request BackendService.

Status mapping per operation:
    submit_score         identity lookup empty → 401 "Unauthorized"; insert → 500
    list_top_scores      select → 500
    list_bosses          select → 500
    register             sign_up → 400; profile insert → 500
    login                sign_in_with_password → 400
    authenticate         token check → 401
    get_profile          select single → 500
    update_experience    update → 500

Known gaps (kept as-is, covered by tests):
    1. submit_score verifies the raw `user_id` through the token check,
       unlike every other authenticated operation.
    2. register creates the account before the profile row and never
       deletes the account when the profile insert fails.
    3. update_experience writes whatever value it is given.

GameService is stateless: the backend handle is passed into every call, so
nothing survives from one request to the next.
"""

import logging
from typing import Any, Dict, List, Optional

from bossrush.exceptions import (
    AuthenticationError,
    BackendError,
    BackendOperationError,
)
from bossrush.services.backend_base import BackendService, Row

logger = logging.getLogger(__name__)

SCORES_TABLE = "scores"
USERS_TABLE = "users"
BOSSES_TABLE = "bosses"

LEADERBOARD_SIZE = 10
DEFAULT_LEVEL = 1
DEFAULT_EXPERIENCE = 0


class GameService:
    """Business logic layer for the BossRush API."""

    # ── Scores ────────────────────────────────────────────────────────────

    async def submit_score(
        self,
        backend: BackendService,
        user_id: Any,
        score: Any,
    ) -> str:
        """
        Record a score for `user_id`.

        The identity check hands `user_id` to the token verification call
        (known gap 1). Any rejection there reads as "no identity" and
        answers 401 before the insert is attempted.

        Raises:
            AuthenticationError: The lookup produced no identity (401).
            BackendOperationError: The insert failed (500).
        """
        identity = await self._lookup_identity(backend, user_id)
        if not identity:
            raise AuthenticationError(message="Unauthorized")

        try:
            await backend.insert(SCORES_TABLE, {"user_id": user_id, "score": score})
        except BackendError as e:
            raise BackendOperationError(message=e.message, context={"table": SCORES_TABLE}) from e

        logger.info("Score %s recorded for user %s", score, user_id)
        return "Score saved successfully"

    async def list_top_scores(self, backend: BackendService) -> List[Row]:
        """Top scores, highest first, each row carrying `users.username`."""
        try:
            return await backend.select(
                SCORES_TABLE,
                columns="*, users(username)",
                order="score",
                ascending=False,
                limit=LEADERBOARD_SIZE,
            )
        except BackendError as e:
            raise BackendOperationError(message=e.message, context={"table": SCORES_TABLE}) from e

    # ── Bosses ────────────────────────────────────────────────────────────

    async def list_bosses(self, backend: BackendService) -> List[Row]:
        """All bosses, lowest level first."""
        try:
            return await backend.select(BOSSES_TABLE, order="level", ascending=True)
        except BackendError as e:
            raise BackendOperationError(message=e.message, context={"table": BOSSES_TABLE}) from e

    # ── Accounts ──────────────────────────────────────────────────────────

    async def register(
        self,
        backend: BackendService,
        email: str,
        password: str,
        username: str,
    ) -> str:
        """
        Create an account, then its profile row.

        Workflow:
            1. sign_up(email, password)        failure → 400
            2. insert users{id, username, level=1, experience=0}
                                               failure → 500

        A failure at step 2 leaves the account from step 1 in place with
        no profile (known gap 2).
        """
        try:
            user = await backend.sign_up(email, password)
        except BackendError as e:
            raise AuthenticationError(message=e.message, status_code=400) from e

        account_id = user.get("id")
        profile = {
            "id": account_id,
            "username": username,
            "level": DEFAULT_LEVEL,
            "experience": DEFAULT_EXPERIENCE,
        }
        try:
            await backend.insert(USERS_TABLE, profile)
        except BackendError as e:
            logger.warning(
                "Profile insert failed for new account %s; account left without profile",
                account_id,
            )
            raise BackendOperationError(
                message=e.message,
                context={"table": USERS_TABLE, "account_id": account_id},
            ) from e

        logger.info("Registered account %s (%s)", account_id, username)
        return "User registered successfully"

    async def login(self, backend: BackendService, email: str, password: str) -> Row:
        """Password sign-in; the `{user, session}` payload is returned verbatim."""
        try:
            result = await backend.sign_in_with_password(email, password)
        except BackendError as e:
            raise AuthenticationError(message=e.message, status_code=400) from e
        return {"user": result.get("user"), "session": result.get("session")}

    # ── Profile ───────────────────────────────────────────────────────────

    async def authenticate(self, backend: BackendService, token: str) -> Row:
        """
        Resolve a bearer token to its identity.

        Raises:
            AuthenticationError: The backend rejected the token (401,
                backend message passed through).
        """
        try:
            return await backend.get_user(token)
        except BackendError as e:
            raise AuthenticationError(message=e.message) from e

    async def get_profile(self, backend: BackendService, identity: Row) -> Row:
        """Exactly one `users` row for the identity; zero or several → 500."""
        try:
            return await backend.select(
                USERS_TABLE,
                filters={"id": identity["id"]},
                single=True,
            )
        except BackendError as e:
            raise BackendOperationError(message=e.message, context={"table": USERS_TABLE}) from e

    async def update_experience(
        self,
        backend: BackendService,
        identity: Row,
        experience: Any,
    ) -> str:
        """Overwrite the caller's experience, no bounds check (known gap 3)."""
        try:
            await backend.update(
                USERS_TABLE,
                {"experience": experience},
                filters={"id": identity["id"]},
            )
        except BackendError as e:
            raise BackendOperationError(message=e.message, context={"table": USERS_TABLE}) from e

        logger.info("Experience of user %s set to %s", identity["id"], experience)
        return "User updated successfully"

    # ── Internal ──────────────────────────────────────────────────────────

    async def _lookup_identity(
        self, backend: BackendService, user_id: Any
    ) -> Optional[Dict[str, Any]]:
        try:
            return await backend.get_user(user_id)
        except BackendError as e:
            logger.info("Identity lookup for score submission rejected: %s", e.message)
            return None


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds no state; the backend handle travels with each call.
game_service = GameService()
