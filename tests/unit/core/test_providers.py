"""Unit tests for backend selection, provider wiring and the seed command."""

from __future__ import annotations

import threading
import time
from io import StringIO
from unittest.mock import MagicMock

import mongomock
import pytest
from django.core.exceptions import ImproperlyConfigured
from django.core.management import call_command

from modules.core import providers
from modules.core.management.commands import seed_data
from modules.customers.providers import build_customer_repository, get_customer_service
from modules.customers.repositories.memory_repository import CustomerMemoryRepository
from modules.customers.repositories.mongo_repository import CustomerMongoRepository
from modules.products import providers as product_providers
from modules.products.providers import build_product_repository
from modules.products.repositories.mongo_repository import ProductMongoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def mongo_client(monkeypatch, settings):
    """Route the shared client to mongomock and select the MongoDB backend."""
    client = mongomock.MongoClient(tz_aware=True)
    monkeypatch.setattr(providers, "MongoClient", lambda *args, **kwargs: client)
    settings.CATALOG = {**settings.CATALOG, "BACKEND": providers.MONGODB}
    providers.get_mongo_client.cache_clear()
    yield client
    providers.get_mongo_client.cache_clear()


class TestBackendSelection:
    def test_memory_is_the_default(self):
        assert providers.repository_backend() == providers.MEMORY
        assert isinstance(build_customer_repository(), CustomerMemoryRepository)

    def test_unknown_backend_is_rejected(self, settings):
        settings.CATALOG = {**settings.CATALOG, "BACKEND": "cassandra"}
        with pytest.raises(ImproperlyConfigured):
            providers.repository_backend()

    def test_mongodb_backend(self, mongo_client):
        assert isinstance(build_customer_repository(), CustomerMongoRepository)
        assert isinstance(build_product_repository(), ProductMongoRepository)

    def test_client_is_shared(self, mongo_client):
        assert providers.get_mongo_client() is providers.get_mongo_client()
        providers.close_mongo_client()
        assert providers.get_mongo_client.cache_info().currsize == 0


class TestServiceProvider:
    def test_service_is_a_process_singleton(self):
        assert get_customer_service() is get_customer_service()

    def test_service_reads_feature_flags(self, settings):
        settings.CATALOG = {**settings.CATALOG, "SERVICE_VERSION": "3.0.0"}
        assert get_customer_service().metrics()["version"] == "3.0.0"

    def test_concurrent_first_calls_share_one_service(self, monkeypatch):
        built = []
        build = product_providers.build_product_repository

        def slow_build():
            time.sleep(0.05)
            repository = build()
            built.append(repository)
            return repository

        monkeypatch.setattr(product_providers, "build_product_repository", slow_build)
        barrier = threading.Barrier(4)
        services = []

        def first_request():
            barrier.wait()
            services.append(product_providers.get_product_service())

        threads = [threading.Thread(target=first_request) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(built) == 1
        assert len({id(service) for service in services}) == 1


class TestSeedCommand:
    def test_seeds_mongodb(self, mongo_client):
        out = StringIO()
        call_command("seed_data", stdout=out)
        assert "customers=6, products=10" in out.getvalue()
        database = mongo_client["catalog"]
        assert database["customers"].count_documents({"active": False}) == 2
        assert database["products"].count_documents({}) == 10

    def test_seed_is_idempotent(self, mongo_client):
        call_command("seed_data", stdout=StringIO())
        out = StringIO()
        call_command("seed_data", stdout=out)
        assert "customers=0, products=0" in out.getvalue()

    def test_client_closed_when_seeding_fails(self, mongo_client, monkeypatch):
        monkeypatch.setattr(
            seed_data, "seed_repository", MagicMock(side_effect=RuntimeError("boom"))
        )
        with pytest.raises(RuntimeError):
            call_command("seed_data", stdout=StringIO())
        assert providers.get_mongo_client.cache_info().currsize == 0

    def test_memory_backend_warns(self):
        out = StringIO()
        call_command("seed_data", stdout=out)
        assert "process-local" in out.getvalue()
