"""
BossRush Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions, each carrying the HTTP status it maps to.
How:   Each exception class carries a message, a status code and an optional
       context dict. Global exception handlers (registered in main.py) catch
       these and return `{"error": message}` with the carried status.
Who:   BackendError is raised by the Supabase client; the rest are raised by
       GameService and the request dependencies.

Exception Hierarchy:
    BossRushError (base)
    ├── ClientInputError       → 400 Bad Request (401 for a missing auth header)
    ├── AuthenticationError    → 401 Unauthorized (400 for bad credentials)
    ├── BackendOperationError  → 500 Internal Server Error
    └── RouteNotFoundError     → 404 Not Found

    BackendError (not an HTTP error)
        Raised by SupabaseService for any rejected backend call. It never
        reaches the client directly: the service layer decides which of the
        classes above it becomes, because the same backend failure maps to
        different statuses depending on the operation (sign-up → 400,
        token check → 401, insert → 500).

Messages:
    The backend's own message string is passed through unmodified. A
    rejected login answers `{"error": "Invalid login credentials"}`, exactly
    what Supabase said.
"""

from typing import Any, Dict, Optional


class BossRushError(Exception):
    """
    Base exception for all BossRush application errors.

    Attributes:
        message:     Client-facing error description (returned as `error`)
        status_code: HTTP status used by the global handler
        context:     Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context or {}
        super().__init__(self.message)


class ClientInputError(BossRushError):
    """
    Raised when the request itself is unusable, before any backend round-trip.

    When:    Malformed JSON, a required body field is missing, or the
             Authorization header is absent (status 401 in that case).
    HTTP:    400 Bad Request by default
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        status_code: Optional[int] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, status_code=status_code, context=ctx)
        self.field = field


class AuthenticationError(BossRushError):
    """
    Raised when the backend rejects credentials or a token.

    When:    Token verification fails (401), the raw user id on score
             submission does not resolve (401), or sign-up / password
             sign-in is refused (400, the client sent bad credentials).
    HTTP:    401 Unauthorized by default
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=status_code, context=context)


class BackendOperationError(BossRushError):
    """
    Raised when a backend query, insert or update fails.

    HTTP:    500 Internal Server Error, body carries the backend's message.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Backend operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RouteNotFoundError(BossRushError):
    """
    Raised when no entry of the route table matches (method, path).

    HTTP:    404 Not Found, plain-text body `Not Found`
    """

    status_code = 404

    def __init__(
        self,
        method: str = "",
        path: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if method:
            ctx["method"] = method
        if path:
            ctx["path"] = path
        super().__init__(message="Not Found", context=ctx)


class BackendError(Exception):
    """
    A rejected call to the external backend.

    Attributes:
        message:     The backend's own error text (or the transport error text)
        status_code: HTTP status the backend answered with, None for
                     transport failures and client-side rejections
        code:        Backend error code when one was supplied (e.g. PGRST116)
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)
