"""In-process implementation of ``IRepository``.

The backing dict is owned by the repository and guarded by a single
``ReadWriteLock``: reads share the lock, mutations hold it exclusively,
and every operation acquires it exactly once.  Entities are deep-copied
on the way in and on the way out, so callers never hold a reference to
stored state.
"""

from __future__ import annotations

from typing import Dict, List, TypeVar

import structlog
from django.utils import timezone

from modules.core.context import RequestContext
from modules.core.dtos import Entity
from modules.core.exceptions import AlreadyExists, NotFound
from modules.core.locks import ReadWriteLock
from modules.core.repositories.filtering import BaseFilter, paginate
from modules.core.repositories.interfaces import IRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=Entity)
F = TypeVar("F", bound=BaseFilter)


class InMemoryRepository(IRepository[T, F]):
    """Concurrent dict-backed repository.

    Matches are visited in insertion order, which keeps pagination stable
    between calls as long as nothing is inserted or removed in between.
    """

    def __init__(self) -> None:
        self._items: Dict[str, T] = {}
        self._lock = ReadWriteLock()

    def get_by_id(self, ctx: RequestContext, key: str) -> T:
        ctx.raise_if_cancelled()
        with self._lock.read():
            entity = self._items.get(key)
            if entity is None:
                raise NotFound(self.entity_name, key)
            return entity.clone()

    def get_all(self, ctx: RequestContext, filters: F) -> List[T]:
        ctx.raise_if_cancelled()
        with self._lock.read():
            ctx.raise_if_cancelled()
            matched = [e for e in self._items.values() if filters.matches(e)]
            window = paginate(matched, filters.page, filters.page_size)
            return [e.clone() for e in window]

    def create(self, ctx: RequestContext, entity: T) -> T:
        ctx.raise_if_cancelled()
        key = self.key_of(entity)
        with self._lock.write():
            ctx.raise_if_cancelled()
            if key in self._items:
                raise AlreadyExists(self.entity_name, key)
            stored = entity.clone()
            now = timezone.now()
            stored.created_at = now
            stored.updated_at = now
            self._items[key] = stored
            result = stored.clone()
        logger.info(f"{self.entity_name}.stored", key=key, backend="memory")
        return result

    def update(self, ctx: RequestContext, entity: T) -> T:
        ctx.raise_if_cancelled()
        key = self.key_of(entity)
        with self._lock.write():
            ctx.raise_if_cancelled()
            existing = self._items.get(key)
            if existing is None:
                raise NotFound(self.entity_name, key)
            stored = entity.clone()
            stored.created_at = existing.created_at
            stored.updated_at = timezone.now()
            self._items[key] = stored
            result = stored.clone()
        logger.info(f"{self.entity_name}.replaced", key=key, backend="memory")
        return result

    def delete(self, ctx: RequestContext, key: str) -> None:
        ctx.raise_if_cancelled()
        with self._lock.write():
            ctx.raise_if_cancelled()
            if key not in self._items:
                raise NotFound(self.entity_name, key)
            del self._items[key]
        logger.info(f"{self.entity_name}.removed", key=key, backend="memory")

    def count(self, ctx: RequestContext, filters: F) -> int:
        ctx.raise_if_cancelled()
        with self._lock.read():
            return sum(1 for e in self._items.values() if filters.matches(e))

    def health_check(self, ctx: RequestContext) -> None:
        ctx.raise_if_cancelled()
        with self._lock.read():
            len(self._items)
