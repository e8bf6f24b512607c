"""Process-wide Product service and repository wiring.

The service owns the request/error counters, so a single instance is
shared by every request handled by this process.
"""

from __future__ import annotations

from modules.core.features import FeatureFlags
from modules.core.providers import (
    MONGODB,
    get_collection,
    process_singleton,
    repository_backend,
    sample_data_enabled,
)
from modules.core.seeding import sample_products, seed_repository
from modules.products.repositories.interfaces import IProductRepository
from modules.products.repositories.memory_repository import ProductMemoryRepository
from modules.products.repositories.mongo_repository import (
    COLLECTION_NAME,
    ProductMongoRepository,
)
from modules.products.services import ProductService


def build_product_repository() -> IProductRepository:
    if repository_backend() == MONGODB:
        return ProductMongoRepository(get_collection(COLLECTION_NAME))
    repository = ProductMemoryRepository()
    if sample_data_enabled():
        seed_repository(repository, sample_products())
    return repository


@process_singleton
def get_product_service() -> ProductService:
    return ProductService(
        repository=build_product_repository(),
        features=FeatureFlags.from_settings(),
    )
