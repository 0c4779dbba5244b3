"""
BossRush Backend — Abstract Backend Service Interface
=======================================================

What:  Abstract base class describing the capabilities the router needs from
       the external auth + storage backend.
How:   SupabaseService implements it over the Supabase REST API; tests supply
       an in-memory implementation through FastAPI dependency overrides.
Who:   Called by GameService; constructed per request by `get_backend`.

Contract shared by every method:
    - Success returns plain JSON-compatible data (dicts / lists of dicts),
      passed through to clients without reshaping.
    - Any rejection raises BackendError with the backend's own message.
      Implementations never raise HTTP-level exceptions; mapping a failure
      to a status code is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

Row = Dict[str, Any]


class BackendService(ABC):
    """
    Capability interface of the managed backend.

    Auth:
        sign_up, sign_in_with_password, get_user
    Storage:
        select, insert, update (equality filters only)
    """

    # ── Auth ──────────────────────────────────────────────────────────────

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> Row:
        """
        Create an account.

        Returns:
            The created user object; `id` is the new account id.

        Raises:
            BackendError: Email taken, weak password, sign-ups disabled, ...
        """
        ...

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> Row:
        """
        Authenticate with email and password.

        Returns:
            `{"user": {...}, "session": {...}}`; the session holds the
            access token clients present as `Authorization: Bearer`.

        Raises:
            BackendError: Invalid credentials, unconfirmed email, ...
        """
        ...

    @abstractmethod
    async def get_user(self, token: str) -> Row:
        """
        Resolve a bearer token to the identity that owns it.

        Raises:
            BackendError: Token missing, malformed, expired or revoked.
        """
        ...

    # ── Storage ───────────────────────────────────────────────────────────

    @abstractmethod
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
        """
        Read rows from `table`.

        Args:
            columns:   PostgREST select list; embedded resources such as
                       `*, users(username)` attach the related row as a
                       nested object.
            filters:   Column → value equality conditions, ANDed.
            order:     Column to sort by.
            ascending: Sort direction for `order`.
            limit:     Maximum number of rows.
            single:    Require exactly one row and return it unwrapped.

        Raises:
            BackendError: Query rejected, or `single` matched zero or
                several rows.
        """
        ...

    @abstractmethod
    async def insert(self, table: str, record: Row) -> None:
        """Insert one record. Raises BackendError on rejection."""
        ...

    @abstractmethod
    async def update(self, table: str, fields: Row, filters: Dict[str, Any]) -> None:
        """Set `fields` on every row matching `filters`. Raises BackendError on rejection."""
        ...
