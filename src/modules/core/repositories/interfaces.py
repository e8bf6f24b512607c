"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T, F]``, the contract satisfied by every storage
backend (in-memory, MongoDB).  Service-layer code depends on this
abstraction, never on a concrete store.

``T`` is the entity type (``Customer``, ``Product``) and ``F`` its filter
type.  Every operation receives the caller's ``RequestContext`` and must
abort with ``Cancelled`` when it has been cancelled or has expired.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, TypeVar

from modules.core.context import RequestContext

T = TypeVar("T")
F = TypeVar("F")


class IRepository(ABC, Generic[T, F]):
    """Base generic repository contract."""

    #: Human-readable entity name used in error messages ("customer").
    entity_name: str = "entity"
    #: Attribute holding the caller-assigned identifying key.
    key_field: str = "id"

    @abstractmethod
    def get_by_id(self, ctx: RequestContext, key: str) -> T:
        """Return a copy of the entity or raise ``NotFound``."""

    @abstractmethod
    def get_all(self, ctx: RequestContext, filters: F) -> List[T]:
        """Return the requested page of entities matching ``filters``.

        A page past the end yields an empty list, not an error.
        """

    @abstractmethod
    def create(self, ctx: RequestContext, entity: T) -> T:
        """Store a new entity, stamping ``created_at == updated_at``.

        Raises ``AlreadyExists`` when the key is taken.
        """

    @abstractmethod
    def update(self, ctx: RequestContext, entity: T) -> T:
        """Replace an entity, keeping ``created_at`` and refreshing ``updated_at``.

        Raises ``NotFound`` when the key is absent.
        """

    @abstractmethod
    def delete(self, ctx: RequestContext, key: str) -> None:
        """Remove an entity or raise ``NotFound``."""

    @abstractmethod
    def count(self, ctx: RequestContext, filters: F) -> int:
        """Number of entities matching ``filters``, ignoring pagination."""

    @abstractmethod
    def health_check(self, ctx: RequestContext) -> None:
        """Return when the store is reachable, raise ``Internal`` otherwise."""

    def key_of(self, entity: T) -> str:
        return getattr(entity, self.key_field)
