"""Product listing filter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from modules.core.repositories.filtering import BaseFilter, in_range
from modules.products.dtos import Product


@dataclass(frozen=True)
class ProductFilter(BaseFilter):
    """Price bounds are inclusive; ``category`` is an exact match."""

    active: Optional[bool] = None
    category: str = ""
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    def matches(self, entity: Product) -> bool:
        if self.active is not None and entity.active != self.active:
            return False
        if self.category and entity.category != self.category:
            return False
        return in_range(entity.price, self.min_price, self.max_price)
