"""Product repository interface.

Binds ``IRepository`` to the Product entity and its filter.  Every
backend for the product catalog extends this class.
"""

from __future__ import annotations

from modules.core.repositories.interfaces import IRepository
from modules.products.dtos import Product
from modules.products.filters import ProductFilter


class IProductRepository(IRepository[Product, ProductFilter]):
    """Repository contract for the Product catalog."""

    entity_name = "product"
    key_field = "product_id"
