"""
BossRush Backend — Score Route Handlers
=========================================

What:  POST /api/scores (submit) and GET /api/scores (leaderboard).
How:   Parse the body, delegate to GameService, wrap the result.

Neither handler reads the Authorization header. Submission checks the
`user_id` from the body instead (see GameService.submit_score).
"""

from typing import Any, Dict, List

from fastapi import Depends

from bossrush.dependencies import get_backend, json_body
from bossrush.schemas.game import MessageResponse, ScoreSubmission
from bossrush.services.backend_base import BackendService
from bossrush.services.game_service import game_service


async def submit_score(
    payload: ScoreSubmission = Depends(json_body(ScoreSubmission)),
    backend: BackendService = Depends(get_backend),
) -> MessageResponse:
    """
    Save a score for the given user.

    Error responses (handled by global exception handlers):
        HTTP 400: Body missing `user_id` or `score`
        HTTP 401: `user_id` does not resolve to an identity
        HTTP 500: Insert rejected by the backend
    """
    message = await game_service.submit_score(backend, payload.user_id, payload.score)
    return MessageResponse(message=message)


async def list_scores(
    backend: BackendService = Depends(get_backend),
) -> List[Dict[str, Any]]:
    """Top 10 scores, highest first, each with `users.username`."""
    return await game_service.list_top_scores(backend)
