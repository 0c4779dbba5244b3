"""
BossRush Backend — API Routes Package
=======================================

What:  The route table: every (method, path) the API answers, mapped to its
       handler.
How:   `build_router()` registers exactly the entries of ROUTE_TABLE on an
       APIRouter; main.py includes it with trailing-slash redirects off, so
       matching is exact on both method and path. Anything else falls
       through to the 404 handler in main.py.

Route Inventory:
    - scores.py:    POST  /api/scores     (submit score)
                    GET   /api/scores     (top 10 scores)
    - bosses.py:    GET   /api/bosses     (all bosses by level)
    - accounts.py:  POST  /api/register   (create account + profile)
                    POST  /api/login      (password sign-in)
    - profile.py:   GET   /api/user       (own profile, Bearer token)
                    PATCH /api/user       (own experience, Bearer token)

Design Principle:
    Routes are THIN: they pull data out of the request, call GameService,
    and return its result. Status codes for failures come from the
    exceptions GameService raises.
"""

from typing import Any, Awaitable, Callable, Dict, Tuple

from fastapi import APIRouter

from bossrush.exceptions import RouteNotFoundError
from bossrush.routes import accounts, bosses, profile, scores
from bossrush.schemas.game import ErrorResponse, LoginResponse, MessageResponse

Handler = Callable[..., Awaitable[Any]]
RouteKey = Tuple[str, str]

ROUTE_TABLE: Dict[RouteKey, Handler] = {
    ("POST", "/api/scores"): scores.submit_score,
    ("GET", "/api/scores"): scores.list_scores,
    ("GET", "/api/bosses"): bosses.list_bosses,
    ("POST", "/api/register"): accounts.register,
    ("POST", "/api/login"): accounts.login,
    ("GET", "/api/user"): profile.get_user,
    ("PATCH", "/api/user"): profile.update_user,
}

# OpenAPI metadata per route (only rendered when ENABLE_DOCS is on)
ROUTE_DOCS: Dict[RouteKey, Dict[str, Any]] = {
    ("POST", "/api/scores"): {
        "summary": "Submit a score",
        "tags": ["Scores"],
        "responses": {401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    },
    ("GET", "/api/scores"): {
        "summary": "List the top 10 scores",
        "tags": ["Scores"],
        "responses": {500: {"model": ErrorResponse}},
    },
    ("GET", "/api/bosses"): {
        "summary": "List bosses by level",
        "tags": ["Bosses"],
        "responses": {500: {"model": ErrorResponse}},
    },
    ("POST", "/api/register"): {
        "summary": "Register an account",
        "tags": ["Accounts"],
        "responses": {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    },
    ("POST", "/api/login"): {
        "summary": "Sign in with email and password",
        "tags": ["Accounts"],
        "responses": {
            200: {"model": LoginResponse},
            400: {"model": ErrorResponse},
        },
    },
    ("GET", "/api/user"): {
        "summary": "Get own profile",
        "tags": ["Profile"],
        "responses": {401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    },
    ("PATCH", "/api/user"): {
        "summary": "Update own experience",
        "tags": ["Profile"],
        "responses": {
            200: {"model": MessageResponse},
            401: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    },
}


def resolve(method: str, path: str) -> Handler:
    """
    Look up the handler for an exact (method, path) pair.

    Raises:
        RouteNotFoundError: No entry matches.
    """
    handler = ROUTE_TABLE.get((method.upper(), path))
    if handler is None:
        raise RouteNotFoundError(method=method, path=path)
    return handler


def build_router() -> APIRouter:
    """Register every ROUTE_TABLE entry, and nothing else, on a fresh router."""
    router = APIRouter()
    for (method, path), endpoint in ROUTE_TABLE.items():
        router.add_api_route(
            path,
            endpoint,
            methods=[method],
            name=f"{method.lower()}_{endpoint.__name__}",
            **ROUTE_DOCS.get((method, path), {}),
        )
    return router
