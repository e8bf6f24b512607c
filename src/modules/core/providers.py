"""Storage backend selection and shared MongoDB client.

``settings.CATALOG["BACKEND"]`` picks the repository implementation for
every vertical: ``memory`` (process-local) or ``mongodb``.
"""

from __future__ import annotations

import threading
from functools import lru_cache, wraps
from typing import Callable, TypeVar

import structlog
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from pymongo import MongoClient
from pymongo.collection import Collection

logger = structlog.get_logger(__name__)

R = TypeVar("R")

MEMORY = "memory"
MONGODB = "mongodb"
BACKENDS = (MEMORY, MONGODB)


def process_singleton(factory: Callable[[], R]) -> Callable[[], R]:
    """Build ``factory`` once per process; concurrent first calls share it.

    Exposes ``cache_info``/``cache_clear`` like ``lru_cache``.
    """
    cached = lru_cache(maxsize=1)(factory)
    lock = threading.Lock()

    @wraps(factory)
    def get() -> R:
        if cached.cache_info().currsize:
            return cached()
        with lock:
            return cached()

    get.cache_info = cached.cache_info
    get.cache_clear = cached.cache_clear
    return get


def repository_backend() -> str:
    backend = settings.CATALOG["BACKEND"]
    if backend not in BACKENDS:
        raise ImproperlyConfigured(
            f"CATALOG_BACKEND must be one of {', '.join(BACKENDS)}; got {backend!r}."
        )
    return backend


def sample_data_enabled() -> bool:
    """Preload sample data into fresh in-memory repositories."""
    return bool(settings.CATALOG.get("SEED_SAMPLE_DATA", False))


@process_singleton
def get_mongo_client() -> MongoClient:
    """Process-wide client; pymongo pools connections internally."""
    conf = settings.CATALOG
    client = MongoClient(
        conf["MONGO_URL"],
        serverSelectionTimeoutMS=conf["MONGO_TIMEOUT_MS"],
        tz_aware=True,
    )
    logger.info("mongo.client_created", database=conf["MONGO_DATABASE"])
    return client


def get_collection(name: str) -> Collection:
    return get_mongo_client()[settings.CATALOG["MONGO_DATABASE"]][name]


def close_mongo_client() -> None:
    """Disconnect the shared client if one was created."""
    if get_mongo_client.cache_info().currsize:
        get_mongo_client().close()
        get_mongo_client.cache_clear()
        logger.info("mongo.client_closed")
