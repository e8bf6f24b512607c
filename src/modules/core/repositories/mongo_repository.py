"""MongoDB implementation of ``IRepository`` (pymongo).

One collection per vertical, documents keyed by the identifying field
(``customerId`` / ``productId``) under a unique index.  ``_id`` is never
projected back into entities.

Error translation:

- no matching document -> ``NotFound``
- duplicate key (pre-insert check *or* unique index) -> ``AlreadyExists``
- driver timeout -> ``Cancelled``
- any other ``PyMongoError``, or a document BSON cannot encode -> ``Internal``
  with the cause chained
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Type, TypeVar

import pymongo
import structlog
from bson.errors import InvalidDocument
from django.utils import timezone
from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from modules.core.context import RequestContext
from modules.core.dtos import MAX_STORED_INT, Entity
from modules.core.exceptions import AlreadyExists, Cancelled, Internal, NotFound
from modules.core.repositories.filtering import BaseFilter
from modules.core.repositories.interfaces import IRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=Entity)
F = TypeVar("F", bound=BaseFilter)

NO_ID = {"_id": False}


def _bson_now() -> datetime:
    """Current time truncated to BSON date precision (milliseconds)."""
    now = timezone.now()
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class MongoRepository(IRepository[T, F]):
    """Document-store repository over a single pymongo ``Collection``.

    ``create`` is read-check-then-insert; two concurrent creates for the
    same key may both pass the check, in which case the unique index
    rejects the second insert and it surfaces as ``AlreadyExists``.
    """

    entity_class: Type[T]

    def __init__(self, collection: Collection) -> None:
        self._collection = collection
        self._collection.create_index(
            [(self.document_key, ASCENDING)],
            unique=True,
            name=f"{self.document_key}_unique",
        )

    @property
    def document_key(self) -> str:
        """camelCase document field holding the identifying key."""
        return self.entity_class.model_fields[self.key_field].alias or self.key_field

    @abstractmethod
    def build_query(self, filters: F) -> Dict[str, Any]:
        """Translate the filter's present predicates into a MongoDB query."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _driver_call(self, ctx: RequestContext, action: str) -> Iterator[None]:
        ctx.raise_if_cancelled()
        try:
            with pymongo.timeout(ctx.remaining()):
                yield
        except PyMongoError as exc:
            log = logger.bind(
                entity=self.entity_name, action=action, request_id=ctx.request_id
            )
            if exc.timeout:
                log.warning("mongo.timeout", error=str(exc))
                raise Cancelled(f"{action} {self.entity_name} timed out") from exc
            log.error("mongo.error", error=str(exc))
            raise Internal(f"failed to {action} {self.entity_name}", cause=exc) from exc
        except (InvalidDocument, OverflowError) as exc:
            logger.error(
                "mongo.encode_error",
                entity=self.entity_name,
                action=action,
                request_id=ctx.request_id,
                error=str(exc),
            )
            raise Internal(f"failed to {action} {self.entity_name}", cause=exc) from exc

    def _to_document(self, entity: T, **dump_options: Any) -> Dict[str, Any]:
        return entity.model_dump(by_alias=True, **dump_options)

    def _from_document(self, document: Dict[str, Any]) -> T:
        return self.entity_class.model_validate(document)

    def _key_query(self, key: str) -> Dict[str, Any]:
        return {self.document_key: key}

    # ------------------------------------------------------------------
    # IRepository
    # ------------------------------------------------------------------

    def get_by_id(self, ctx: RequestContext, key: str) -> T:
        with self._driver_call(ctx, "get"):
            document = self._collection.find_one(self._key_query(key), NO_ID)
        if document is None:
            raise NotFound(self.entity_name, key)
        return self._from_document(document)

    def get_all(self, ctx: RequestContext, filters: F) -> List[T]:
        skip = filters.page * filters.page_size
        if skip > MAX_STORED_INT:
            # No stored page starts beyond the BSON int64 range.
            ctx.raise_if_cancelled()
            return []
        with self._driver_call(ctx, "list"):
            cursor = self._collection.find(self.build_query(filters), NO_ID).sort(
                self.document_key, ASCENDING
            )
            if filters.paginated:
                cursor = cursor.skip(skip).limit(filters.page_size)
            documents = list(cursor)
        return [self._from_document(d) for d in documents]

    def create(self, ctx: RequestContext, entity: T) -> T:
        key = self.key_of(entity)
        stored = entity.clone()
        now = _bson_now()
        stored.created_at = now
        stored.updated_at = now
        with self._driver_call(ctx, "create"):
            if self._collection.find_one(self._key_query(key), NO_ID) is not None:
                raise AlreadyExists(self.entity_name, key)
            try:
                self._collection.insert_one(self._to_document(stored))
            except DuplicateKeyError as exc:
                logger.warning(
                    f"{self.entity_name}.create_race_lost",
                    key=key,
                    request_id=ctx.request_id,
                )
                raise AlreadyExists(self.entity_name, key) from exc
        logger.info(f"{self.entity_name}.stored", key=key, backend="mongodb")
        return stored

    def update(self, ctx: RequestContext, entity: T) -> T:
        key = self.key_of(entity)
        changes = self._to_document(entity, exclude={"created_at"})
        changes["updatedAt"] = _bson_now()
        with self._driver_call(ctx, "update"):
            document = self._collection.find_one_and_update(
                self._key_query(key),
                {"$set": changes},
                projection=NO_ID,
                return_document=ReturnDocument.AFTER,
            )
        if document is None:
            raise NotFound(self.entity_name, key)
        logger.info(f"{self.entity_name}.replaced", key=key, backend="mongodb")
        return self._from_document(document)

    def delete(self, ctx: RequestContext, key: str) -> None:
        with self._driver_call(ctx, "delete"):
            result = self._collection.delete_one(self._key_query(key))
        if result.deleted_count == 0:
            raise NotFound(self.entity_name, key)
        logger.info(f"{self.entity_name}.removed", key=key, backend="mongodb")

    def count(self, ctx: RequestContext, filters: F) -> int:
        with self._driver_call(ctx, "count"):
            return self._collection.count_documents(self.build_query(filters))

    def health_check(self, ctx: RequestContext) -> None:
        with self._driver_call(ctx, "ping"):
            self._collection.database.client.admin.command("ping")
