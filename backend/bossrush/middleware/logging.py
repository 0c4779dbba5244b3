"""
BossRush Backend — Request Logging Middleware
===============================================

What:  One access-log line per HTTP request.
How:   Measures time from middleware entry to response, then logs method,
       path, status, duration, request ID and client IP.
Who:   Applied to every request via Starlette middleware.
When:  Inside RequestIDMiddleware (uses its request ID for correlation).

Log line:
    POST /api/scores 200 84.2ms [a1b2c3d4] from 192.168.1.100

Never logged: request bodies (passwords on /api/register and /api/login)
and the Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from bossrush.middleware.request_id import request_id_var

logger = logging.getLogger("bossrush.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status code and duration of each request.

    Level by status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO

    Duration covers the whole handler, including both backend round-trips
    on the authenticated routes.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        # request.client is None under some test transports
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
