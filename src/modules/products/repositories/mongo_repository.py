"""MongoDB implementation of the Product repository.

Documents live in ``<database>.products`` keyed by ``productId``.
"""

from __future__ import annotations

from typing import Any, Dict

from modules.core.repositories.mongo_repository import MongoRepository
from modules.products.dtos import Product
from modules.products.filters import ProductFilter
from modules.products.repositories.interfaces import IProductRepository

COLLECTION_NAME = "products"


class ProductMongoRepository(MongoRepository[Product, ProductFilter], IProductRepository):
    """Concrete Product repository backed by a pymongo collection."""

    entity_class = Product

    def build_query(self, filters: ProductFilter) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if filters.active is not None:
            query["active"] = filters.active
        if filters.category:
            query["category"] = filters.category
        price: Dict[str, float] = {}
        if filters.min_price is not None:
            price["$gte"] = filters.min_price
        if filters.max_price is not None:
            price["$lte"] = filters.max_price
        if price:
            query["price"] = price
        return query
