import pytest

from modules.core.exceptions import Internal
from modules.customers.repositories.memory_repository import CustomerMemoryRepository

pytestmark = pytest.mark.integration


class TestHealthCheck:
    def test_health_check_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert set(data["services"]) == {"customers", "products"}

    def test_health_check_reports_each_service(self, client):
        data = client.get("/health").json()
        assert data["services"]["customers"]["service"] == "customer-api"
        assert data["services"]["products"]["service"] == "product-api"
        assert data["services"]["customers"]["dependencies"]["repository"] == "healthy"

    def test_unreachable_repository_returns_503(self, client, monkeypatch):
        def unreachable(self, ctx):
            raise Internal("failed to ping customer")

        monkeypatch.setattr(CustomerMemoryRepository, "health_check", unreachable)
        response = client.get("/health")
        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["services"]["customers"]["status"] == "unhealthy"
        assert data["services"]["products"]["status"] == "healthy"
