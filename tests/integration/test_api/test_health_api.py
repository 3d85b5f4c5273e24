"""Integration tests for the health check."""
import pytest

from eventsync.core.config import settings


@pytest.mark.integration
class TestHealth:

    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == {"status": "connected"}
        assert data["sync"]["auto_sync"] is False
        assert data["sync"]["inflight"]["size"] == 0

    def test_reports_inflight_keys(self, client, coordinator):
        coordinator.inflight.acquire("ensureEvent:e1")

        data = client.get("/health").json()

        assert "ensureEvent:e1" in data["sync"]["inflight"]["entries"]

    def test_api_version_header(self, client):
        response = client.get("/health")
        assert response.headers["X-API-Version"] == settings.APP_VERSION

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"
