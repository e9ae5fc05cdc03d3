"""
Client-side settings for the session state machine.

Loaded from SESSION_CLIENT_* environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class SessionClientSettings(BaseSettings):
    """Where the identity API lives and where the session is persisted."""

    model_config = SettingsConfigDict(
        env_prefix="SESSION_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_base_url: str = "http://localhost:8000"
    auth_path: str = "/api/auth"
    storage_path: str = ".session/auth.json"
    timeout_seconds: float = 10.0

    # Must match the server's CSRF marker
    csrf_header_name: str = "X-Requested-With"
    csrf_header_value: str = "XMLHttpRequest"


@lru_cache
def get_session_client_settings() -> SessionClientSettings:
    return SessionClientSettings()
