"""
BossRush Backend — Profile Route Handlers
===========================================

What:  GET /api/user (own profile) and PATCH /api/user (own experience).
How:   Both depend on `require_identity`, declared before the body, so the
       Authorization check always happens first:

           no header       → 401 "Missing Authorization header", no backend call
           rejected token  → 401 with the backend message
           otherwise       → profile read / experience update on identity.id
"""

from typing import Any, Dict

from fastapi import Depends

from bossrush.dependencies import get_backend, json_body, require_identity
from bossrush.schemas.game import ExperienceUpdate, MessageResponse
from bossrush.services.backend_base import BackendService
from bossrush.services.game_service import game_service


async def get_user(
    identity: Dict[str, Any] = Depends(require_identity),
    backend: BackendService = Depends(get_backend),
) -> Dict[str, Any]:
    """The caller's `users` row; 500 if there is not exactly one."""
    return await game_service.get_profile(backend, identity)


async def update_user(
    identity: Dict[str, Any] = Depends(require_identity),
    payload: ExperienceUpdate = Depends(json_body(ExperienceUpdate)),
    backend: BackendService = Depends(get_backend),
) -> MessageResponse:
    """Overwrite the caller's experience with the supplied value."""
    message = await game_service.update_experience(backend, identity, payload.experience)
    return MessageResponse(message=message)
