"""Integration tests for rate limits on public and login endpoints."""
import pytest


@pytest.mark.integration
@pytest.mark.rate_limit
class TestRateLimiting:

    def test_attendance_toggle_limit(self, client, registration):
        url = f"/api/v1/attendance/{registration.reg_code}/toggle"
        payload = {"member_name": "Ada", "expected_count": 5}

        # Every call fails on the attendance limit but still counts
        for _ in range(30):
            assert client.post(url, json=payload).status_code == 409

        assert client.post(url, json=payload).status_code == 429

    def test_admin_login_limit(self, client):
        credentials = {"username": "nobody", "password": "wrong-password"}

        for _ in range(10):
            assert client.post("/api/v1/auth/admin/login", json=credentials).status_code == 401

        assert client.post("/api/v1/auth/admin/login", json=credentials).status_code == 429
