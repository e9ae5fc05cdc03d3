"""Tests for health check endpoints."""

from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import ServiceContainer

from tests.conftest import InMemoryUserDirectory, make_settings


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"

    def test_health_response_structure(self, client):
        """Health response should have correct structure."""
        data = client.get("/api/health").json()
        assert set(data.keys()) == {"status", "version"}

    def test_readiness_when_configured(self, client):
        """Signing key set and directory injected: ready."""
        response = client.get("/api/ready")
        assert response.status_code == 200
        assert response.json() == {
            "status": "ready",
            "signing_key": "configured",
            "user_directory": "configured",
        }

    def test_readiness_reports_missing_signing_key(self):
        container = ServiceContainer(make_settings(jwt_secret=""), directory=InMemoryUserDirectory())
        client = TestClient(create_app(container=container))

        data = client.get("/api/ready").json()

        assert data["status"] == "not_ready"
        assert data["signing_key"] == "missing"
        assert data["user_directory"] == "configured"

    def test_readiness_reports_missing_directory(self):
        container = ServiceContainer(make_settings(supabase_url="", supabase_service_role_key=""))
        client = TestClient(create_app(container=container))

        data = client.get("/api/ready").json()

        assert data["status"] == "not_ready"
        assert data["user_directory"] == "missing"

    def test_readiness_with_supabase_settings(self):
        """Configured Supabase counts as ready without connecting."""
        container = ServiceContainer(make_settings(
            supabase_url="https://example.supabase.co",
            supabase_service_role_key="service-key",
        ))
        client = TestClient(create_app(container=container))

        assert client.get("/api/ready").json()["user_directory"] == "configured"
