"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeBackend
from coretrack_assistant.api import create_app
from coretrack_assistant.router import ModelRouter


@pytest.fixture
def backend():
    """Provide a scripted primary backend."""
    return FakeBackend("flash", "Restock rice today.")


@pytest.fixture
def client(test_settings, rate_limiter, backend):
    """Provide a test client over an app with a scripted router."""
    router = ModelRouter(rate_limiter, backend, settings=test_settings)
    app = create_app(test_settings, model_router=router)
    with TestClient(app) as test_client:
        yield test_client


class TestHealthEndpoints:
    """Tests for health and readiness."""

    def test_health(self, client, test_settings):
        """Test the health endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "agent": test_settings.agent_name}

    def test_ready_reports_ai_configuration(self, client):
        """Test that readiness shows whether AI answers are available."""
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["ai_configured"] is True

    def test_ready_without_key(self, test_settings, rate_limiter):
        """Test readiness when no backend has credentials."""
        router = ModelRouter(
            rate_limiter, FakeBackend("flash", configured=False), settings=test_settings
        )
        with TestClient(create_app(test_settings, model_router=router)) as client:
            assert client.get("/ready").json()["ai_configured"] is False


class TestChatEndpoint:
    """Tests for POST /chat."""

    def test_ai_answer(self, client, backend):
        """Test an AI answer round trip."""
        response = client.post(
            "/chat",
            json={
                "message": "what should I restock?",
                "context": {"tenant_id": "tenant-a", "subscription_plan": "pro"},
                "contextual_data": "Low stock: rice",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "Restock rice today."
        assert data["source"] == "ai"
        assert data["backend"] == "flash"
        assert "LIVE BUSINESS DATA:\nLow stock: rice" in backend.calls[0]

    def test_rate_limited_answer(self, client):
        """Test that the limited response is still a 200 with wait time."""
        for _ in range(12):
            client.post("/chat", json={"message": "hi"})

        response = client.post("/chat", json={"message": "hi"})

        assert response.status_code == 200
        assert response.json()["wait_seconds"] == 60
        assert response.json()["source"] == "fallback"

    def test_empty_message_rejected(self, client):
        """Test request validation."""
        response = client.post("/chat", json={"message": ""})

        assert response.status_code == 422


class TestRateLimitEndpoints:
    """Tests for the rate limit admin endpoints."""

    def test_tenant_status(self, client):
        """Test a tracked tenant's status."""
        client.post("/chat", json={"message": "hi", "context": {"tenant_id": "tenant-a"}})

        response = client.get("/ratelimit/tenants/tenant-a")

        assert response.status_code == 200
        data = response.json()
        assert data["tracked"] is True
        assert data["requests_this_minute"] == 1
        assert data["requests_today"] == 1
        assert data["max_per_minute"] == 12
        assert data["max_per_day"] == 400
        assert data["blocked"] is False

    def test_unknown_tenant_status(self, client, rate_limiter):
        """Test that looking up a tenant does not start tracking it."""
        response = client.get("/ratelimit/tenants/nobody")

        assert response.status_code == 200
        assert response.json()["tracked"] is False
        assert "nobody" not in rate_limiter

    def test_reset_tenant(self, client):
        """Test that a reset clears a rate limit block."""
        for _ in range(13):
            client.post("/chat", json={"message": "hi", "context": {"tenant_id": "t1"}})
        assert client.get("/ratelimit/tenants/t1").json()["blocked"] is True

        response = client.post("/ratelimit/tenants/t1/reset")

        assert response.status_code == 200
        assert response.json() == {"status": "reset", "tenant_id": "t1"}
        status = client.get("/ratelimit/tenants/t1").json()
        assert status["blocked"] is False
        assert status["requests_today"] == 0
        assert client.post(
            "/chat", json={"message": "hi", "context": {"tenant_id": "t1"}}
        ).json()["source"] == "ai"

    def test_fleet_status(self, client):
        """Test aggregate counts."""
        client.post("/chat", json={"message": "hi", "context": {"tenant_id": "a"}})
        client.post("/chat", json={"message": "hi", "context": {"tenant_id": "b"}})

        data = client.get("/ratelimit/status").json()

        assert data["total_tenants"] == 2
        assert data["active_tenants"] == 2
        assert data["blocked_tenants"] == 0
        assert data["total_requests_today"] == 2

    def test_sweeper_status(self, client):
        """Test that the sweeper runs for the app's lifetime."""
        data = client.get("/ratelimit/sweeper").json()

        assert data["running"] is True
        assert data["interval_ms"] == 3_600_000
