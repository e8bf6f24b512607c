"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer catalog, delegating
persistence to the injected ``ICustomerRepository``.

Business rules enforced here:
- Inactive customers are not served individually (``Unavailable``).
- ``customer_id`` and ``name`` are required; ``name`` is at most 255
  characters and ``email`` at most 320.
- ``loyalty_points`` cannot be negative.
- Keys that name a listing route (``active``, ``health``, ``metrics``)
  are rejected.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List

from modules.core.context import RequestContext
from modules.core.exceptions import ValidationFailed
from modules.core.services import CatalogService
from modules.customers.dtos import (
    Customer,
    CustomerHealthResponse,
    CustomerListResponse,
    CustomerSummary,
)
from modules.customers.filters import CustomerFilter

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 320


class CustomerService(CatalogService[Customer, CustomerFilter]):
    """Application service for Customer use-cases."""

    service_name = "customer-api"
    entity_plural = "customers"
    health_model = CustomerHealthResponse
    reserved_keys = frozenset({"active", "health", "metrics"})

    def validate(self, customer: Customer) -> None:
        if not customer.customer_id:
            raise ValidationFailed("customer_id.required", "customer ID is required")
        if not customer.name:
            raise ValidationFailed("name.required", "customer name is required")
        if len(customer.name) > NAME_MAX_LENGTH:
            raise ValidationFailed(
                "name.max_length",
                f"customer name cannot exceed {NAME_MAX_LENGTH} characters",
            )
        if customer.email and len(customer.email) > EMAIL_MAX_LENGTH:
            raise ValidationFailed(
                "email.max_length",
                f"customer email cannot exceed {EMAIL_MAX_LENGTH} characters",
            )
        if customer.loyalty_points < 0:
            raise ValidationFailed(
                "loyalty_points.non_negative", "loyalty points cannot be negative"
            )

    def build_listing(
        self, customers: List[Customer], total: int, filters: CustomerFilter
    ) -> CustomerListResponse:
        summaries = [CustomerSummary.from_entity(c) for c in customers]
        active = sum(1 for s in summaries if s.active)
        return CustomerListResponse(
            customers=summaries,
            total=total,
            active_count=active,
            inactive_count=len(summaries) - active,
            page=filters.page if filters.paginated else None,
            page_size=filters.page_size if filters.paginated else None,
        )

    def get_active(
        self, ctx: RequestContext, filters: CustomerFilter
    ) -> CustomerListResponse:
        """Listing restricted to active customers, whatever ``filters.active`` says."""
        return self._list(ctx, dataclasses.replace(filters, active=True), "get_active")

    def health_extras(self, ctx: RequestContext, reachable: bool) -> Dict[str, Any]:
        if not reachable:
            return {"entity_count": 0, "total_customers": 0, "active_customers": 0}
        total = self.safe_count(ctx, CustomerFilter())
        return {
            "entity_count": total,
            "total_customers": total,
            "active_customers": self.safe_count(ctx, CustomerFilter(active=True)),
        }
