from modules.session.config import SessionClientSettings, get_session_client_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("SESSION_CLIENT_API_BASE_URL", raising=False)
    settings = SessionClientSettings(_env_file=None)

    assert settings.api_base_url == "http://localhost:8000"
    assert settings.auth_path == "/api/auth"
    assert settings.csrf_header_name == "X-Requested-With"
    assert settings.csrf_header_value == "XMLHttpRequest"


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("SESSION_CLIENT_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("SESSION_CLIENT_TIMEOUT_SECONDS", "2.5")

    settings = SessionClientSettings(_env_file=None)

    assert settings.api_base_url == "https://api.example.com"
    assert settings.timeout_seconds == 2.5


def test_get_session_client_settings_caches():
    get_session_client_settings.cache_clear()
    assert get_session_client_settings() is get_session_client_settings()
