"""
Configuration Management for Personally

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The access core itself is pure; only the membership rules (invitation
expiry, member limits) and the audit trail read these values.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from PERSONALLY_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PERSONALLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )

    # Audit trail
    audit_enabled: bool = Field(
        default=True,
        description="Record access decisions in the audit trail"
    )

    # Invitations
    invitation_expiry_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Days before a pending invitation expires"
    )

    # Member limits
    default_max_members: int = Field(
        default=50,
        ge=1,
        description="Member limit for new projects when none is given"
    )
    max_members_limit: int = Field(
        default=1000,
        ge=1,
        description="Highest member limit a project may request"
    )

    @model_validator(mode='after')
    def validate_member_limits(self) -> 'AppSettings':
        """Default member limit must fit under the hard limit."""
        if self.default_max_members > self.max_members_limit:
            raise ValueError("default_max_members cannot exceed max_members_limit")
        return self

    @property
    def is_production(self) -> bool:
        return self.app_environment.lower() == "production"


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return AppSettings()
