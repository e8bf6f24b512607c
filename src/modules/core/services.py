"""Generic catalog service layer (Use Cases).

``CatalogService[T, F]`` orchestrates one ``IRepository[T, F]`` and adds
the rules a repository must not know about: availability gating,
business validation, fault injection for resilience testing, request and
error accounting, and the health/metrics snapshots.  Each vertical
(customers, products) subclasses it once.

Accounting: every public entry point records exactly one request; it
also records one error when the call ends in ``ValidationFailed``,
``Cancelled`` or ``Internal``.  ``NotFound``, ``AlreadyExists`` and
``Unavailable`` are caller outcomes and are not counted as errors.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Dict, FrozenSet, Generic, Iterator, List, Optional, Type, TypeVar

import structlog
from django.utils import timezone

from modules.core.context import RequestContext
from modules.core.dtos import Entity
from modules.core.exceptions import (
    Cancelled,
    DomainError,
    Internal,
    Unavailable,
    ValidationFailed,
)
from modules.core.features import FeatureFlags
from modules.core.health import HealthResponse, HealthStatus
from modules.core.metrics import RequestCounters
from modules.core.repositories.filtering import BaseFilter
from modules.core.repositories.interfaces import IRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=Entity)
F = TypeVar("F", bound=BaseFilter)

COUNTED_ERRORS = (ValidationFailed, Cancelled)


class CatalogService(ABC, Generic[T, F]):
    """Application service shared by the catalog verticals.

    Receives an ``IRepository`` via constructor injection (DIP).  Feature
    flags are read once, at construction.
    """

    service_name: str = "catalog-api"
    entity_plural: str = "entities"
    health_model: Type[HealthResponse] = HealthResponse
    # Keys shadowed by list-level routes (``/<entities>/health/`` ...).
    reserved_keys: FrozenSet[str] = frozenset({"health", "metrics"})

    def __init__(
        self,
        repository: IRepository[T, F],
        features: Optional[FeatureFlags] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._repo = repository
        self._features = features or FeatureFlags()
        self._rng = rng or random.Random()
        self._counters = RequestCounters()

    @property
    def entity_name(self) -> str:
        return self._repo.entity_name

    # ------------------------------------------------------------------
    # Vertical hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def validate(self, entity: T) -> None:
        """Raise ``ValidationFailed`` for the first violated business rule."""

    @abstractmethod
    def build_listing(self, entities: List[T], total: int, filters: F) -> Any:
        """Project a page of entities into the vertical's listing response."""

    def is_available(self, entity: T) -> bool:
        return entity.active

    def health_extras(self, ctx: RequestContext, reachable: bool) -> Dict[str, Any]:
        """Additional health snapshot fields."""
        return {}

    # ------------------------------------------------------------------
    # Accounting
    # ------------------------------------------------------------------

    @contextmanager
    def _tracked(
        self, ctx: RequestContext, operation: str, failure_message: str, **fields: Any
    ) -> Iterator[Any]:
        log = logger.bind(
            operation=operation,
            entity=self.entity_name,
            request_id=ctx.request_id,
            **fields,
        )
        failed = False
        try:
            yield log
        except COUNTED_ERRORS as exc:
            failed = True
            log.warning(f"{self.entity_name}.{operation}_failed", code=exc.code, reason=exc.message)
            raise
        except Internal as exc:
            failed = True
            log.error(
                f"{self.entity_name}.{operation}_failed",
                code=exc.code,
                reason=exc.message,
                cause=repr(exc.cause) if exc.cause else None,
            )
            raise Internal(failure_message, cause=exc.cause or exc) from exc
        except DomainError as exc:
            log.warning(f"{self.entity_name}.{operation}_rejected", code=exc.code)
            raise
        except Exception as exc:
            failed = True
            log.exception(f"{self.entity_name}.{operation}_failed")
            raise Internal(failure_message, cause=exc) from exc
        finally:
            self._counters.record(failed)

    def _inject_faults(self, ctx: RequestContext, log: Any, key: str) -> None:
        features = self._features
        if features.simulate_latency:
            delay_ms = self._rng.randint(features.min_latency_ms, features.max_latency_ms)
            log.info("fault.latency", delay_ms=delay_ms)
            ctx.sleep(delay_ms / 1000)
        if features.simulate_errors and self._rng.random() < features.error_rate:
            raise Internal("simulated error for testing")
        if key in features.fault_keys:
            raise Internal(f"{self.entity_name} {key} always returns an error")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_one(self, ctx: RequestContext, key: str) -> T:
        """Retrieve a single available entity.

        Raises:
            NotFound: if the key is absent.
            Unavailable: if the entity exists but is inactive.
            Internal: on storage failure or injected fault.
            Cancelled: if the context is cancelled or expires.
        """
        with self._tracked(
            ctx, "get_one", f"Failed to retrieve {self.entity_name}", key=key
        ) as log:
            log.info(f"{self.entity_name}.lookup_started")
            ctx.raise_if_cancelled()
            self._inject_faults(ctx, log, key)
            entity = self._repo.get_by_id(ctx, key)
            if not self.is_available(entity):
                raise Unavailable(self.entity_name, key)
            log.info(f"{self.entity_name}.retrieved")
            return entity

    def get_many(self, ctx: RequestContext, filters: F) -> Any:
        """Return a listing page plus the total match count."""
        return self._list(ctx, filters, "get_many")

    def _list(self, ctx: RequestContext, filters: F, operation: str) -> Any:
        with self._tracked(
            ctx, operation, f"Failed to retrieve {self.entity_plural}", filters=repr(filters)
        ) as log:
            entities = self._repo.get_all(ctx, filters)
            total = self._repo.count(ctx, filters.without_pagination())
            response = self.build_listing(entities, total, filters)
            log.info(f"{self.entity_name}.listed", count=len(entities), total=total)
            return response

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self, ctx: RequestContext, entity: T) -> T:
        """Validate and store a new entity.

        Raises:
            ValidationFailed: if a business rule is violated (nothing stored).
                Keys in ``reserved_keys`` are rejected as ``<key_field>.reserved``.
            AlreadyExists: if the key is taken.
        """
        key = self._repo.key_of(entity)
        with self._tracked(
            ctx, "create", f"Failed to create {self.entity_name}", key=key
        ) as log:
            self._reject_reserved_key(key)
            self.validate(entity)
            created = self._repo.create(ctx, entity)
            log.info(f"{self.entity_name}.created")
            return created

    def _reject_reserved_key(self, key: str) -> None:
        if key in self.reserved_keys:
            field = self._repo.key_field
            raise ValidationFailed(f"{field}.reserved", f"{field} '{key}' is reserved")

    def update(self, ctx: RequestContext, entity: T) -> T:
        key = self._repo.key_of(entity)
        with self._tracked(
            ctx, "update", f"Failed to update {self.entity_name}", key=key
        ) as log:
            self.validate(entity)
            updated = self._repo.update(ctx, entity)
            log.info(f"{self.entity_name}.updated")
            return updated

    def delete(self, ctx: RequestContext, key: str) -> None:
        with self._tracked(
            ctx, "delete", f"Failed to delete {self.entity_name}", key=key
        ) as log:
            self._repo.delete(ctx, key)
            log.info(f"{self.entity_name}.deleted")

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def safe_count(self, ctx: RequestContext, filters: F) -> int:
        """Count for health reporting; 0 when the repository fails."""
        try:
            return self._repo.count(ctx, filters)
        except Exception as exc:
            logger.warning(
                f"{self.entity_name}.count_unavailable",
                request_id=ctx.request_id,
                error=str(exc),
            )
            return 0

    def health_status(self, ctx: RequestContext) -> HealthResponse:
        """Health snapshot; never raises for an unreachable repository."""
        dependencies: Dict[str, str] = {}
        try:
            self._repo.health_check(ctx)
            dependencies["repository"] = "healthy"
            reachable = True
        except Exception as exc:
            reason = exc.message if isinstance(exc, DomainError) else str(exc)
            dependencies["repository"] = f"unhealthy: {reason}"
            reachable = False
            logger.error(
                "health_check_repository_failure",
                entity=self.entity_name,
                request_id=ctx.request_id,
                error=reason,
            )

        snapshot = self._counters.snapshot()
        error_rate = snapshot.error_rate or 0.0
        if not reachable:
            status = HealthStatus.UNHEALTHY
        elif error_rate > self._features.unhealthy_error_ratio:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.HEALTHY

        extras = self.health_extras(ctx, reachable)
        metrics: Dict[str, int] = {
            "total_requests": snapshot.requests,
            "total_errors": snapshot.errors,
            f"{self.entity_plural}_count": extras.pop("entity_count", 0),
        }
        if snapshot.requests:
            metrics["error_rate_percent"] = snapshot.errors * 100 // snapshot.requests

        response = self.health_model(
            status=status,
            service=self.service_name,
            version=self._features.service_version,
            timestamp=timezone.now(),
            uptime=str(timedelta(seconds=int(snapshot.uptime_seconds))),
            environment=self._features.environment,
            metrics=metrics,
            dependencies=dependencies,
            **extras,
        )
        logger.info(
            "health_check_completed",
            entity=self.entity_name,
            request_id=ctx.request_id,
            status=status,
            requests=snapshot.requests,
            errors=snapshot.errors,
        )
        return response

    def metrics(self) -> Dict[str, Any]:
        """Pure read of the accumulated counters.

        ``error_rate`` and ``success_rate`` appear only once at least one
        request has been recorded.
        """
        snapshot = self._counters.snapshot()
        metrics: Dict[str, Any] = {
            "service": self.service_name,
            "version": self._features.service_version,
            "environment": self._features.environment,
            "uptime_seconds": int(snapshot.uptime_seconds),
            "total_requests": snapshot.requests,
            "total_errors": snapshot.errors,
            "timestamp": timezone.now().isoformat(),
        }
        if snapshot.requests:
            metrics["error_rate"] = snapshot.error_rate
            metrics["success_rate"] = snapshot.success_rate
        return metrics
