"""Integration tests for health, readiness and metrics endpoints"""

from unittest.mock import patch

from observability.health import ComponentHealth, HealthStatus


def broker_ok():
    return ComponentHealth(status=HealthStatus.HEALTHY, message="Broker connection OK")


def broker_down():
    return ComponentHealth(status=HealthStatus.DEGRADED, message="Broker error: refused")


class TestHealth:
    """Test /health and /ready"""

    def test_healthy(self, client):
        with patch("observability.router.check_broker_health", side_effect=broker_ok):
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"]["status"] == "healthy"

    def test_broker_down_is_degraded_not_failed(self, client):
        with patch("observability.router.check_broker_health", side_effect=broker_down):
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    def test_ready(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_request_id_echoed(self, client):
        response = client.get("/ready", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"


class TestMetrics:
    """Test /metrics exposition"""

    def test_metrics_exposed_after_matching_run(self, buyer_client, teff_request, teff_listing):
        buyer_client.post(f"/api/v1/matches/trigger/{teff_request.id}")

        response = buyer_client.get("/metrics")

        assert response.status_code == 200
        assert "tradematch_matching_runs_total" in response.text
        assert "tradematch_matches_created_total" in response.text
