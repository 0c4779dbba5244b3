"""
BossRush Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route Handler

    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log request details with the generated request ID

    Responses pass back through the same chain in reverse, which is where
    the X-Request-ID header is set and the access line is written.

No CORS middleware: it would answer OPTIONS preflights for every path,
and any (method, path) outside the route table must answer 404.
"""
