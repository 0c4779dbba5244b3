"""
BossRush Backend — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models for request bodies and the fixed response envelopes.
How:   Request bodies are parsed by the `json_body` dependency after any
       authentication step; rows read from the backend are returned as-is
       and have no schema of their own.

Validation is limited to presence: every field is `Any`, so values reach
the backend exactly as sent. Nothing is type- or range-checked; a score
can be a string and experience can go down.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class ScoreSubmission(BaseModel):
    """Body of POST /api/scores."""
    user_id: Any = Field(..., description="Account id of the player (also used as the identity check)")
    score: Any = Field(..., description="Score value, stored as sent")


class RegisterRequest(BaseModel):
    """Body of POST /api/register."""
    email: Any = Field(..., description="Account email")
    password: Any = Field(..., description="Account password")
    username: Any = Field(..., description="Display name stored on the profile row")


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    email: Any = Field(...)
    password: Any = Field(...)


class ExperienceUpdate(BaseModel):
    """Body of PATCH /api/user."""
    experience: Any = Field(..., description="New experience value, stored unchanged")


# ══════════════════════════════════════════════════════════════════════════
# Response Models — Fixed envelopes
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Confirmation returned by every successful mutation."""
    message: str


class LoginResponse(BaseModel):
    """
    Successful login: user and session exactly as the backend issued them.

    `session.access_token` is the value clients send back as
    `Authorization: Bearer <token>`.
    """
    user: Optional[Dict[str, Any]] = None
    session: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """
    Uniform error body for 400, 401 and 500 responses.

    Example:
        {"error": "Invalid login credentials"}
    """
    error: str = Field(description="Error message, backend text passed through unmodified")
