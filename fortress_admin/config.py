"""
Fortress Admin — Configuration via Pydantic Settings.

All settings are loaded from environment variables or .env file.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


VERSION = "0.1.0"


class Settings(BaseSettings):
    """Application-wide settings loaded from env / .env."""

    # ── General ──────────────────────────────────────────────
    app_name: str = "Fortress Admin"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"

    # ── Session Auth ─────────────────────────────────────────
    auth_secret: Optional[str] = Field(
        default=None,
        description="HMAC key shared by token issuer and verifier. "
        "Unset means every protected request is denied.",
    )
    admin_password: Optional[str] = Field(
        default=None, description="Console login password",
    )
    token_max_age_secs: int = Field(
        default=60 * 60 * 24 * 7, ge=0,
        description="Maximum session token age in seconds (7 days)",
    )
    token_clock_skew_secs: int = Field(
        default=300, ge=0,
        description="How far in the future issued_at may lie",
    )
    cookie_secure: bool = False

    # ── Login Brute-Force Protection ─────────────────────────
    login_max_attempts: int = Field(
        default=5, description="Login attempts allowed per IP per window",
    )
    login_window_secs: int = Field(
        default=15 * 60, description="Login attempt window in seconds",
    )
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis URL for shared login attempt counters",
    )

    # ── Fortress Engine API ──────────────────────────────────
    api_url: str = Field(
        default="http://127.0.0.1:9090",
        description="Base URL of the Fortress engine admin API",
    )
    api_key: str = Field(
        default="", description="Value sent as X-Fortress-Key",
    )
    api_timeout: float = Field(
        default=10.0, description="Timeout in seconds for engine requests",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"debug", "info", "warning", "error", "critical"}
        if v.lower() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.lower()

    @field_validator("auth_secret", "admin_password")
    @classmethod
    def blank_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    model_config = {
        "env_prefix": "FORTRESS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton
settings = Settings()
