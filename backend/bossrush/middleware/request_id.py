"""
BossRush Backend — Request ID Middleware
==========================================

What:  Assigns an ID to each incoming request and returns it in `X-Request-ID`.
How:   Uses the client-provided header when present, otherwise a short UUID;
       stores it in a ContextVar so loggers and exception handlers can read it.
Who:   Applied to every request via Starlette middleware.
When:  Before request logging (the access log line carries the ID).

The ID never appears in response bodies; error bodies stay exactly
`{"error": "..."}`.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Take X-Request-ID from the request if the client sent one
        2. Otherwise generate an 8-character ID
        3. Store in ContextVar and request.state
        4. Echo it on the response
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
