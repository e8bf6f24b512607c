"""Product DTOs for the Service Layer.

Framework-agnostic pydantic v2 models:

- ``Product``: the stored entity (mutable; the repository copies it).
- ``ProductSummary``: catalog listing projection (no stock, no timestamps).
- ``ProductCatalogResponse``: listing page with total.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.core.dtos import MAX_STORED_INT, Entity, SummaryModel


class Product(Entity):
    """Catalog product keyed by the caller-assigned ``product_id``."""

    product_id: str = ""
    name: str = ""
    description: str = ""
    price: float = 0.0
    category: str = ""
    stock: int = Field(default=0, le=MAX_STORED_INT)


class ProductSummary(SummaryModel):
    product_id: str
    name: str
    price: float

    @classmethod
    def from_entity(cls, product: Product) -> ProductSummary:
        return cls(
            product_id=product.product_id,
            name=product.name,
            price=product.price,
        )


class ProductCatalogResponse(BaseModel):
    """Listing page; ``page``/``page_size`` are echoed only when paginated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    products: List[ProductSummary]
    total: int
    page: Optional[int] = None
    page_size: Optional[int] = Field(default=None, alias="pageSize")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
