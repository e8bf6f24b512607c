"""Customer DTOs for the Service Layer.

Framework-agnostic pydantic v2 models:

- ``Customer``: the stored entity (mutable; the repository copies it).
- ``CustomerSummary``: minimal listing projection.
- ``CustomerListResponse``: listing page with total and active/inactive
  partition.
- ``CustomerHealthResponse``: health snapshot with customer counts.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.core.dtos import MAX_STORED_INT, CamelModel, Entity, SummaryModel
from modules.core.health import HealthResponse


class Address(CamelModel):
    street: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = ""


class Preferences(CamelModel):
    newsletter: bool = False
    notifications: bool = False


class Customer(Entity):
    """Customer record keyed by the caller-assigned ``customer_id``."""

    customer_id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    address: Address = Field(default_factory=Address)
    customer_tier: str = ""
    preferences: Preferences = Field(default_factory=Preferences)
    registration_date: Optional[datetime] = None
    last_login: Optional[datetime] = None
    loyalty_points: int = Field(default=0, le=MAX_STORED_INT)


class CustomerSummary(SummaryModel):
    customer_id: str
    name: str
    active: bool

    @classmethod
    def from_entity(cls, customer: Customer) -> CustomerSummary:
        return cls(
            customer_id=customer.customer_id,
            name=customer.name,
            active=customer.active,
        )


class CustomerListResponse(BaseModel):
    """Listing page; ``page``/``page_size`` are echoed only when paginated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    customers: List[CustomerSummary]
    total: int
    active_count: int = 0
    inactive_count: int = 0
    page: Optional[int] = None
    page_size: Optional[int] = Field(default=None, alias="pageSize")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CustomerHealthResponse(HealthResponse):
    total_customers: int = 0
    active_customers: int = 0
