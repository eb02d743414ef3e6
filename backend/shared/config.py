"""
Centralized configuration for the Postly backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced (e.g., STRIPE_*, SUPABASE_*, JWT_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Postly API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""  # direct Postgres URI, used by run_migrations.py

    # Document collections
    users_table: str = "users"
    posts_table: str = "posts"

    # Object storage
    storage_bucket: str = "attachments"
    avatar_extensions: list[str] = ["jpg", "jpeg", "png"]

    # Session tokens
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    session_cookie_name: str = "token"
    session_cookie_secure: bool = False

    # Stripe (loaded by billing module)
    stripe_secret_key: str = ""
    stripe_currency: str = "usd"

    # Frontend URLs (for checkout redirects)
    frontend_url: str = "http://localhost:5173"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
