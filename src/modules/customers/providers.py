"""Process-wide Customer service and repository wiring.

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
from modules.core.seeding import sample_customers, seed_repository
from modules.customers.repositories.interfaces import ICustomerRepository
from modules.customers.repositories.memory_repository import CustomerMemoryRepository
from modules.customers.repositories.mongo_repository import (
    COLLECTION_NAME,
    CustomerMongoRepository,
)
from modules.customers.services import CustomerService


def build_customer_repository() -> ICustomerRepository:
    if repository_backend() == MONGODB:
        return CustomerMongoRepository(get_collection(COLLECTION_NAME))
    repository = CustomerMemoryRepository()
    if sample_data_enabled():
        seed_repository(repository, sample_customers())
    return repository


@process_singleton
def get_customer_service() -> CustomerService:
    return CustomerService(
        repository=build_customer_repository(),
        features=FeatureFlags.from_settings(),
    )
