"""Integration tests for configuration-driven fault injection."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture()
def failing_catalog(settings):
    settings.CATALOG = {**settings.CATALOG, "SIMULATE_ERRORS": True, "ERROR_RATE": 1.0}


@pytest.fixture()
def no_fault_keys(settings):
    settings.CATALOG = {**settings.CATALOG, "FAULT_KEYS": []}


class TestFaultInjection:
    def test_full_error_rate_fails_every_lookup(self, failing_catalog, api_client):
        for _ in range(3):
            response = api_client.get("/api/v1/products/product-1/")
            assert response.status_code == 500
            assert response.json()["message"] == "Failed to retrieve product"
        health = api_client.get("/api/v1/products/health/")
        assert health.status_code == 206

    def test_listings_are_not_fault_injected(self, failing_catalog, api_client):
        assert api_client.get("/api/v1/customers/").status_code == 200

    def test_fault_keys_are_configurable(self, no_fault_keys, api_client):
        response = api_client.get("/api/v1/customers/customer-error/")
        assert response.status_code == 404


class TestSampleData:
    def test_preloaded_memory_catalog(self, settings, api_client):
        settings.CATALOG = {**settings.CATALOG, "SEED_SAMPLE_DATA": True}
        customers = api_client.get("/api/v1/customers/").json()
        assert customers["total"] == 6
        assert customers["inactive_count"] == 2
        products = api_client.get("/api/v1/products/").json()
        assert products["total"] == 10
        assert api_client.get("/api/v1/customers/customer-premium/").status_code == 200
