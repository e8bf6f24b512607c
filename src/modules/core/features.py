"""Service feature flags, read once from ``settings.CATALOG``.

Latency and error simulation exist for resilience testing only; both are
off unless explicitly enabled through the environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Mapping, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


@dataclass(frozen=True)
class FeatureFlags:
    service_version: str = "1.0.0"
    environment: str = "development"
    simulate_latency: bool = False
    min_latency_ms: int = 50
    max_latency_ms: int = 200
    simulate_errors: bool = False
    error_rate: float = 0.0
    fault_keys: FrozenSet[str] = field(default_factory=frozenset)
    unhealthy_error_ratio: float = 0.10

    def __post_init__(self) -> None:
        if not 0.0 <= self.error_rate <= 1.0:
            raise ImproperlyConfigured("ERROR_RATE must be between 0.0 and 1.0.")
        if self.min_latency_ms < 0 or self.max_latency_ms < self.min_latency_ms:
            raise ImproperlyConfigured(
                "Latency bounds must satisfy 0 <= MIN_LATENCY_MS <= MAX_LATENCY_MS."
            )

    @classmethod
    def from_settings(cls, catalog: Optional[Mapping[str, Any]] = None) -> FeatureFlags:
        conf = settings.CATALOG if catalog is None else catalog
        return cls(
            service_version=conf.get("SERVICE_VERSION", "1.0.0"),
            environment=conf.get("ENVIRONMENT", "development"),
            simulate_latency=conf.get("SIMULATE_LATENCY", False),
            min_latency_ms=conf.get("MIN_LATENCY_MS", 50),
            max_latency_ms=conf.get("MAX_LATENCY_MS", 200),
            simulate_errors=conf.get("SIMULATE_ERRORS", False),
            error_rate=conf.get("ERROR_RATE", 0.0),
            fault_keys=frozenset(conf.get("FAULT_KEYS", ())),
        )
