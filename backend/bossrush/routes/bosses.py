"""
BossRush Backend — Boss Route Handler
=======================================

What:  GET /api/bosses, every boss ordered by level (lowest first).
"""

from typing import Any, Dict, List

from fastapi import Depends

from bossrush.dependencies import get_backend
from bossrush.services.backend_base import BackendService
from bossrush.services.game_service import game_service


async def list_bosses(
    backend: BackendService = Depends(get_backend),
) -> List[Dict[str, Any]]:
    return await game_service.list_bosses(backend)
