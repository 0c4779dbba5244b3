"""
BossRush Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn bossrush.main:app),
       and by tests to get a fresh app per test.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐                       │
    │  │ Req ID   │→│  Logging    │                       │
    │  └──────────┘ └─────────────┘                       │
    │                                                     │
    │  Routes: ROUTE_TABLE (7 exact method+path pairs)    │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ BossRushError→{"error"} │ 404/405→"Not Found" │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (missing Supabase settings are logged)
    3. Log startup complete

    Shutdown:
    1. Log shutdown complete (no pooled resources: backend clients are
       per request)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bossrush import __version__
from bossrush.config import settings
from bossrush.exceptions import BossRushError, RouteNotFoundError
from bossrush.middleware.logging import RequestLoggingMiddleware
from bossrush.middleware.request_id import RequestIDMiddleware, request_id_var
from bossrush.routes import build_router, resolve

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup (before any other initialization).
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,  # Override any existing logging config
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Validate backend configuration
        3. Log successful startup
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("BossRush Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: requests still get answered, backend calls fail with
        # the transport error as their message.
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")
    else:
        logger.info("Backend: %s", settings.supabase_url)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("BossRush Backend shutting down...")
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        Starlette 404 / 405 with no
        ROUTE_TABLE entry           → 404 text/plain "Not Found"
        BossRushError               → exc.status_code, {"error": exc.message}
        RequestValidationError      → 400 {"error": ...}
        Exception (fallback)        → 500 {"error": "Internal Server Error"}
    """

    def not_found_response(exc: RouteNotFoundError) -> PlainTextResponse:
        logger.info(
            "[%s] No route for %s %s",
            request_id_var.get(""),
            exc.context.get("method", ""),
            exc.context.get("path", ""),
        )
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Router-level misses. An unknown path (404) and a known path with
        another method (405) both answer 404 `Not Found` once the route
        table confirms there is no entry for the pair.
        """
        if exc.status_code in (404, 405):
            try:
                resolve(request.method, request.url.path)
            except RouteNotFoundError as miss:
                return not_found_response(miss)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(BossRushError)
    async def handle_app_error(request: Request, exc: BossRushError):
        """Client and backend failures; the message goes out unmodified."""
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Framework-level parameter validation (headers, query)."""
        rid = request_id_var.get("")
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning("[%s] Request validation error: %s", rid, message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Stack trace is logged server-side only.
        """
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error"},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.

    The public surface is exactly ROUTE_TABLE. Interactive docs are only
    mounted when ENABLE_DOCS is set.
    """
    app = FastAPI(
        title="BossRush API",
        description=(
            "Scores, bosses and player accounts for BossRush. "
            "Every operation is served by the Supabase project the server is configured with."
        ),
        version=__version__,
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.enable_docs else None,
        lifespan=lifespan,
    )
    # Exact path matching: /api/scores/ is a different path, not a redirect
    app.router.redirect_slashes = False

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → route
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(build_router())

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `bossrush.main:app` to be importable
app = create_app()
