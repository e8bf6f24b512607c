import pytest

from rest_framework.test import APIClient

from modules.core.context import RequestContext
from modules.customers.providers import get_customer_service
from modules.products.providers import get_product_service


@pytest.fixture(autouse=True)
def _fresh_services():
    """Each test gets new process-wide services (empty stores, zero counters)."""
    get_customer_service.cache_clear()
    get_product_service.cache_clear()
    yield
    get_customer_service.cache_clear()
    get_product_service.cache_clear()


@pytest.fixture()
def ctx():
    """Unbounded request context."""
    return RequestContext(request_id="test-request")


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid
