"""Product service layer (Use Cases).

Orchestrates business logic for the Product catalog, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- Inactive products are not served individually (``Unavailable``).
- ``product_id`` and ``name`` are required; ``name`` is at most 255
  characters and ``description`` at most 2000.
- Price must be greater than zero; stock cannot be negative.
- Keys that name a listing route (``health``, ``metrics``) are rejected.
"""

from __future__ import annotations

from typing import Any, Dict, List

from modules.core.context import RequestContext
from modules.core.exceptions import ValidationFailed
from modules.core.services import CatalogService
from modules.products.dtos import Product, ProductCatalogResponse, ProductSummary
from modules.products.filters import ProductFilter

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2000


class ProductService(CatalogService[Product, ProductFilter]):
    """Application service for Product use-cases."""

    service_name = "product-api"
    entity_plural = "products"

    def validate(self, product: Product) -> None:
        if not product.product_id:
            raise ValidationFailed("product_id.required", "product ID is required")
        if not product.name:
            raise ValidationFailed("name.required", "product name is required")
        if len(product.name) > NAME_MAX_LENGTH:
            raise ValidationFailed(
                "name.max_length",
                f"product name cannot exceed {NAME_MAX_LENGTH} characters",
            )
        if product.price <= 0:
            raise ValidationFailed("price.positive", "product price must be greater than 0")
        if product.stock < 0:
            raise ValidationFailed("stock.non_negative", "product stock cannot be negative")
        if len(product.description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationFailed(
                "description.max_length",
                f"product description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
            )

    def build_listing(
        self, products: List[Product], total: int, filters: ProductFilter
    ) -> ProductCatalogResponse:
        return ProductCatalogResponse(
            products=[ProductSummary.from_entity(p) for p in products],
            total=total,
            page=filters.page if filters.paginated else None,
            page_size=filters.page_size if filters.paginated else None,
        )

    def health_extras(self, ctx: RequestContext, reachable: bool) -> Dict[str, Any]:
        if not reachable:
            return {"entity_count": 0}
        return {"entity_count": self.safe_count(ctx, ProductFilter())}
