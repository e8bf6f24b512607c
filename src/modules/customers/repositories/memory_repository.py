"""In-memory Customer repository."""

from __future__ import annotations

from modules.core.repositories.memory_repository import InMemoryRepository
from modules.customers.dtos import Customer
from modules.customers.filters import CustomerFilter
from modules.customers.repositories.interfaces import ICustomerRepository


class CustomerMemoryRepository(InMemoryRepository[Customer, CustomerFilter], ICustomerRepository):
    """Concrete Customer repository backed by a process-local dict."""
