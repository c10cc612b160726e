"""
Unified Configuration Management for TeamHub

Single source of truth for the team/org core using Pydantic BaseSettings.
All settings can be overridden via environment variables with TEAMHUB_ prefix.

Usage:
    from teamhub.config import get_settings

    settings = get_settings()
    print(settings.database_path)
    print(settings.invitation_default_duration)
"""

import secrets
import warnings
from pathlib import Path
from typing import Literal
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


INSECURE_SECRETS = [
    "",
    "secret",
    "changeme",
    "change_me",
]

MIN_SECRET_LENGTH = 32


class TeamHubSettings(BaseSettings):
    """
    Unified configuration for TeamHub

    All settings can be overridden via environment variables with TEAMHUB_ prefix.
    Example: TEAMHUB_INVITATION_JWT_SECRET_KEY=mysecret
    """

    model_config = SettingsConfigDict(
        env_prefix="TEAMHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================
    # SYSTEM SETTINGS
    # ============================================

    environment: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Application environment"
    )

    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    structured_logs: bool = Field(
        default=False,
        description="Emit JSON log lines instead of plain text"
    )

    # ============================================
    # STORAGE SETTINGS
    # ============================================

    data_dir: Path = Field(
        default_factory=lambda: Path.cwd() / ".teamhub_data",
        description="Base data directory for the document store"
    )

    database_name: str = Field(
        default="teamhub.db",
        description="SQLite file holding every collection"
    )

    db_timeout_seconds: float = Field(
        default=30.0,
        description="How long a writer waits for the store lock before failing"
    )

    # ============================================
    # INVITATION SETTINGS
    # ============================================

    invitation_jwt_secret_key: str = Field(
        default="",
        description="Secret used to sign invitation expiry tokens (REQUIRED in production)"
    )

    invitation_jwt_algorithm: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS256",
        description="Invitation token signing algorithm (only HMAC algorithms allowed)"
    )

    invitation_default_duration: str = Field(
        default="7d",
        description="Invitation lifetime used when a caller does not pass one"
    )

    # ============================================
    # VALIDATION SETTINGS
    # ============================================

    team_name_min_length: int = Field(default=4, ge=1)
    game_name_min_length: int = Field(default=2, ge=1)

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("data_dir", mode="after")
    @classmethod
    def ensure_data_dir_exists(cls, v: Path) -> Path:
        """Ensure data directory exists"""
        v.mkdir(parents=True, exist_ok=True)
        return v

    @model_validator(mode="after")
    def validate_invitation_secret(self) -> "TeamHubSettings":
        """Validate the invitation signing secret is properly configured"""
        if self.invitation_jwt_secret_key.lower() in INSECURE_SECRETS:
            if self.environment == "production":
                raise ValueError(
                    "INVITATION_JWT_SECRET_KEY must be set in production! "
                    "Set TEAMHUB_INVITATION_JWT_SECRET_KEY to a secure random string (at least 32 chars)"
                )
            # Outside production, auto-generate a random secret
            object.__setattr__(self, "invitation_jwt_secret_key", secrets.token_urlsafe(32))
            warnings.warn(
                "INVITATION_JWT_SECRET_KEY not set - using auto-generated secret. "
                "Pending invitations will stop verifying after a restart. "
                "Set TEAMHUB_INVITATION_JWT_SECRET_KEY for persistent invitations.",
                UserWarning,
                stacklevel=2
            )

        if len(self.invitation_jwt_secret_key) < MIN_SECRET_LENGTH and self.environment == "production":
            raise ValueError(
                f"INVITATION_JWT_SECRET_KEY is too short ({len(self.invitation_jwt_secret_key)} chars). "
                f"Must be at least {MIN_SECRET_LENGTH} characters for security."
            )

        return self

    @property
    def database_path(self) -> Path:
        """Path of the SQLite file backing the document store"""
        return self.data_dir / self.database_name

    def to_dict(self) -> dict:
        """Convert settings to dictionary (secret masked)"""
        data = self.model_dump()
        data["invitation_jwt_secret_key"] = "***"
        return data


# ============================================
# SINGLETON PATTERN
# ============================================

@lru_cache()
def get_settings() -> TeamHubSettings:
    """
    Get cached settings instance (singleton pattern)

    Returns:
        TeamHubSettings: Application settings
    """
    return TeamHubSettings()
