"""
Centralized configuration for the identity backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., JWT_*, SUPABASE_*).
"""

from functools import lru_cache
from typing import Literal
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
    app_name: str = "Community Gaming Identity"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "test", "production"] = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Credential signing
    jwt_secret: str = ""
    jwt_refresh_secret: str = ""  # Falls back to jwt_secret when empty
    jwt_algorithm: str = "HS256"
    access_token_ttl_seconds: int = 15 * 60
    refresh_token_ttl_seconds: int = 7 * 24 * 60 * 60

    # Cookies
    session_cookie_name: str = "session"
    refresh_cookie_name: str = "refresh_token"
    refresh_cookie_path: str = "/api/auth"

    # CSRF marker header
    csrf_header_name: str = "X-Requested-With"
    csrf_header_value: str = "XMLHttpRequest"

    # Password hashing (bcrypt cost factor)
    password_hash_rounds: int = 12

    # Supabase (user directory)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    users_table: str = "users"

    @property
    def cookie_secure(self) -> bool:
        """Cookies carry the Secure attribute only in production."""
        return self.environment == "production"

    @property
    def refresh_signing_secret(self) -> str:
        return self.jwt_refresh_secret or self.jwt_secret


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
