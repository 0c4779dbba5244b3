"""
BossRush Backend — Request Dependencies
=========================================

What:  FastAPI dependencies shared by the route handlers:
       - get_backend:      a fresh backend handle per request
       - require_identity: the `Authorization: Bearer` preamble
       - json_body:        request body parsing into a schema
How:   Handlers declare them with Depends(); FastAPI resolves them in
       parameter order, so a handler listing `require_identity` before its
       body never reads the body of an unauthenticated request.

Backend lifecycle:
    Each request opens its own httpx.AsyncClient, wraps it in a
    SupabaseService, and closes it when the response is done. FastAPI caches
    the dependency within one request, so require_identity and the handler
    share the same handle. Tests replace get_backend through
    `app.dependency_overrides`.
"""

import logging
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Optional, Tuple, Type, TypeVar

import httpx
from fastapi import Depends, Header, Request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from bossrush.config import settings
from bossrush.exceptions import ClientInputError
from bossrush.services.backend_base import BackendService
from bossrush.services.game_service import game_service
from bossrush.services.supabase_service import SupabaseService

logger = logging.getLogger(__name__)

BodyT = TypeVar("BodyT", bound=BaseModel)


async def get_backend() -> AsyncGenerator[BackendService, None]:
    """
    Provides a backend handle scoped to the current request.

    Usage in route handlers:
        async def list_bosses(backend: BackendService = Depends(get_backend)):
            ...
    """
    async with httpx.AsyncClient(timeout=settings.backend_timeout) as client:
        yield SupabaseService(
            client=client,
            url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
        )


def extract_bearer_token(authorization: str) -> str:
    """
    Second whitespace-delimited segment of the header value.

    "Bearer abc"  → "abc"
    "Bearer"      → ""   (the backend rejects it as a missing session)

    The scheme word is not checked.
    """
    parts = authorization.split()
    return parts[1] if len(parts) > 1 else ""


async def require_identity(
    authorization: Optional[str] = Header(default=None),
    backend: BackendService = Depends(get_backend),
) -> Dict[str, Any]:
    """
    Authentication preamble for /api/user.

    Raises:
        ClientInputError (401): Header absent or empty; no backend call is made.
        AuthenticationError (401): Backend rejected the token.
    """
    if not authorization:
        raise ClientInputError(message="Missing Authorization header", status_code=401)

    token = extract_bearer_token(authorization)
    return await game_service.authenticate(backend, token)


def describe_validation_error(exc: PydanticValidationError) -> Tuple[Optional[str], str]:
    """Field name (None for the body as a whole) and message for the first problem."""
    errors = exc.errors()
    if not errors:
        return None, "Invalid request body"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    if not field:
        return None, "Request body must be a JSON object"
    if first.get("type") == "missing":
        return field, f"Missing required field '{field}'"
    return field, f"Invalid value for '{field}': {first.get('msg', 'invalid')}"


def json_body(model: Type[BodyT]) -> Callable[[Request], Awaitable[BodyT]]:
    """
    Build a dependency that parses the request body as `model`.

    Bad JSON or a missing field raises ClientInputError (400); the
    offending field, when there is one, travels as `field`.
    """

    async def parse(request: Request) -> BodyT:
        try:
            payload = await request.json()
        except ValueError as e:
            raise ClientInputError(message="Request body must be valid JSON") from e

        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            field, message = describe_validation_error(e)
            logger.debug("Rejected %s body: %s", model.__name__, message)
            raise ClientInputError(message=message, field=field) from e

    parse.__name__ = f"parse_{model.__name__}"
    return parse
