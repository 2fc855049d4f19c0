"""
Application configuration management using Pydantic Settings.

This module centralizes all environment-based configuration for the application,
providing type-safe access to configuration values with validation.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
import logging

from calendar_backend.core.exceptions import ConfigurationException

logger = logging.getLogger('CORE_CONFIG')

AUTH_MODE_SESSION = "session"
AUTH_MODE_PASSPHRASE = "passphrase"

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_SCOPES = [
    "openid",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/calendar",
]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Name of the application
        debug: Debug mode flag

        # Database Configuration
        database_url: SQLAlchemy database URL

        # Connection Pool Settings (ignored for SQLite)
        db_pool_size: Database connection pool size
        db_max_overflow: Maximum overflow connections
        db_pool_timeout: Pool checkout timeout in seconds
        db_pool_recycle: Connection recycle time in seconds

        # Authentication
        auth_mode: "session" (Google login) or "passphrase" (shared header)
        session_secret: Key used to sign the session cookie
        app_password: Shared passphrase expected in the x-app-password header
        owner_email: Account that passphrase mode acts as
        legacy_owner_email: Account that inherits ownerless records on login

        # Google
        google_client_id / google_client_secret: OAuth client credentials
        google_redirect_uri: OAuth callback URL registered with Google
        google_refresh_token: Fallback refresh token (passphrase mode)
        calendar_id: Target calendar, "primary" by default
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
    )

    # Application Settings
    app_name: str = "Personal Calendar API"
    debug: bool = False
    environment: str = "development"

    # Database Configuration
    database_url: str = "sqlite:///./calendar.db"

    # Connection Pool Settings
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 10
    db_pool_recycle: int = 3600
    db_pool_pre_ping: bool = True
    db_echo: bool = False

    # Authentication
    auth_mode: str = AUTH_MODE_SESSION
    session_secret: Optional[str] = None
    session_max_age: int = 14 * 24 * 60 * 60
    session_https_only: bool = False
    app_password: Optional[str] = None
    owner_email: Optional[str] = None
    legacy_owner_email: Optional[str] = None
    post_login_redirect: str = "/"

    # Google
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_redirect_uri: str = "http://localhost:3000/api/auth/google/callback"
    google_refresh_token: Optional[str] = None
    calendar_id: str = "primary"
    max_event_results: int = 2500

    # HTTP
    cors_origins: List[str] = ["http://localhost:5173"]
    static_dir: Optional[str] = None

    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    def validate_for_mode(self) -> None:
        """
        Check that the selected auth mode has the secrets it needs.

        Raises:
            ConfigurationException: If the mode is unknown or incomplete
        """
        missing = []

        if self.auth_mode == AUTH_MODE_SESSION:
            if not self.session_secret:
                missing.append("SESSION_SECRET")
            if not self.google_client_id:
                missing.append("GOOGLE_CLIENT_ID")
            if not self.google_client_secret:
                missing.append("GOOGLE_CLIENT_SECRET")
        elif self.auth_mode == AUTH_MODE_PASSPHRASE:
            if not self.app_password:
                missing.append("APP_PASSWORD")
            if not self.owner_email:
                missing.append("OWNER_EMAIL")
        else:
            raise ConfigurationException(
                f"Unknown AUTH_MODE '{self.auth_mode}' "
                f"(expected '{AUTH_MODE_SESSION}' or '{AUTH_MODE_PASSPHRASE}')"
            )

        if missing:
            raise ConfigurationException(
                f"Configuration incomplete for auth mode '{self.auth_mode}'. Missing: {', '.join(missing)}",
                {"missing": missing},
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings object
    """
    return Settings()
