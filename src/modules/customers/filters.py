"""Customer listing filter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from modules.core.repositories.filtering import BaseFilter, contains_ignore_case
from modules.customers.dtos import Customer


@dataclass(frozen=True)
class CustomerFilter(BaseFilter):
    """``email`` is a case-insensitive partial match; ``customer_tier`` is exact."""

    active: Optional[bool] = None
    email: str = ""
    customer_tier: str = ""

    def matches(self, entity: Customer) -> bool:
        if self.active is not None and entity.active != self.active:
            return False
        if self.email and not contains_ignore_case(entity.email, self.email):
            return False
        if self.customer_tier and entity.customer_tier != self.customer_tier:
            return False
        return True
