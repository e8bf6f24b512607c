"""Customer repository interface.

Binds ``IRepository`` to the Customer entity and its filter.  Every
backend for the customer catalog extends this class.
"""

from __future__ import annotations

from modules.core.repositories.interfaces import IRepository
from modules.customers.dtos import Customer
from modules.customers.filters import CustomerFilter


class ICustomerRepository(IRepository[Customer, CustomerFilter]):
    """Repository contract for the Customer catalog."""

    entity_name = "customer"
    key_field = "customer_id"
