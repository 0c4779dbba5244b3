"""
BossRush Backend — Account Route Handlers
===========================================

What:  POST /api/register and POST /api/login.
How:   Thin wrappers over GameService.register / GameService.login.

Both answer 400 with the backend's message when the auth service refuses
the credentials, since the client can fix those.
"""

import logging
from typing import Any, Dict

from fastapi import Depends

from bossrush.dependencies import get_backend, json_body
from bossrush.schemas.game import LoginRequest, MessageResponse, RegisterRequest
from bossrush.services.backend_base import BackendService
from bossrush.services.game_service import game_service

logger = logging.getLogger(__name__)


async def register(
    payload: RegisterRequest = Depends(json_body(RegisterRequest)),
    backend: BackendService = Depends(get_backend),
) -> MessageResponse:
    """
    Create an account and its profile (level 1, experience 0).

    Error responses:
        HTTP 400: Sign-up refused (email taken, weak password, ...)
        HTTP 500: Profile insert failed. The account already exists at
                  this point and is not removed.
    """
    message = await game_service.register(
        backend,
        email=payload.email,
        password=payload.password,
        username=payload.username,
    )
    return MessageResponse(message=message)


async def login(
    payload: LoginRequest = Depends(json_body(LoginRequest)),
    backend: BackendService = Depends(get_backend),
) -> Dict[str, Any]:
    """
    Password sign-in.

    Returns:
        `{"user": ..., "session": ...}` exactly as issued by the backend.
    """
    logger.debug("Login attempt")
    return await game_service.login(backend, email=payload.email, password=payload.password)
