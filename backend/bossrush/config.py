"""
BossRush Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py (logging, docs), the backend dependency
       (Supabase endpoint + key) and the `python -m bossrush` entry point.
When:  Loaded once at module import time; validated before app starts.

The two Supabase values are the only settings the request path depends on.
Everything else tunes the server around it.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults except the Supabase pair,
    which must be provided for any request to reach the backend.
    """

    # ── Supabase ──────────────────────────────────────────────────────────
    # What: Project URL, e.g. https://abcdefgh.supabase.co (no trailing path)
    supabase_url: str = Field(
        default="",
        description="Supabase project URL (auth and REST endpoints live under it)",
    )

    # What: Public anon key, sent as `apikey` on every backend call
    supabase_anon_key: str = Field(
        default="",
        description="Supabase anon (public) API key",
    )

    # What: Per-call timeout for backend requests, in seconds
    # Unset means calls wait until the backend answers or the connection drops.
    backend_timeout: Optional[float] = Field(default=None, gt=0)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # What: Serve /docs and /openapi.json. Off by default so the public
    # surface is exactly the seven API routes.
    enable_docs: bool = Field(default=False)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths are appended as `/auth/v1/...`; avoid `//auth`."""
        return v.strip().rstrip("/")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # SUPABASE_URL and supabase_url both work
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the backend connection settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every missing value and raises one ValueError listing them.
        """
        errors = []
        if not self.supabase_url:
            errors.append(
                "SUPABASE_URL is not set. "
                "Find it under Project Settings → API in the Supabase dashboard."
            )
        if not self.supabase_anon_key:
            errors.append(
                "SUPABASE_ANON_KEY is not set. "
                "Use the project's anon/public key, never the service_role key."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance — imported throughout the application
settings = Settings()
