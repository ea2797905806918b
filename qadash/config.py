"""
Dashboard settings.

Every field can be overridden by the upper-cased environment variable of the
same name (DATA_DIR, SESSION_TTL_HOURS, ...) or a .env file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime settings for the API server."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: str = "*"

    # ==========================================================================
    # Storage
    # ==========================================================================

    data_dir: str = "./data"
    seed_demo_data: bool = True
    reconcile_on_startup: bool = True

    # ==========================================================================
    # Authentication
    # ==========================================================================

    session_ttl_hours: int = 24
    reset_code_ttl_minutes: int = 60

    # Demo behaviour: any reset code is accepted. Set false to require the
    # code handed out by forgot-password.
    accept_any_reset_code: bool = True

    # Temporary credential for accounts created from team-member records
    default_member_password: str = "hello123"

    # Bootstrap account that never gets a team-member profile
    bootstrap_admin_email: str = "admin@qa-team.com"
    default_team_id: int = 1

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings()
