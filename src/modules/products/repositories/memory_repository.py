"""In-memory Product repository."""

from __future__ import annotations

from modules.core.repositories.memory_repository import InMemoryRepository
from modules.products.dtos import Product
from modules.products.filters import ProductFilter
from modules.products.repositories.interfaces import IProductRepository


class ProductMemoryRepository(InMemoryRepository[Product, ProductFilter], IProductRepository):
    """Concrete Product repository backed by a process-local dict."""
