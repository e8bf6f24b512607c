"""MongoDB implementation of the Customer repository.

Documents live in ``<database>.customers`` keyed by ``customerId``.
The ``email`` predicate is a case-insensitive partial match.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from modules.core.repositories.mongo_repository import MongoRepository
from modules.customers.dtos import Customer
from modules.customers.filters import CustomerFilter
from modules.customers.repositories.interfaces import ICustomerRepository

COLLECTION_NAME = "customers"


class CustomerMongoRepository(MongoRepository[Customer, CustomerFilter], ICustomerRepository):
    """Concrete Customer repository backed by a pymongo collection."""

    entity_class = Customer

    def build_query(self, filters: CustomerFilter) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if filters.active is not None:
            query["active"] = filters.active
        if filters.customer_tier:
            query["customerTier"] = filters.customer_tier
        if filters.email:
            query["email"] = {"$regex": re.escape(filters.email), "$options": "i"}
        return query
