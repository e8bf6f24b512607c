"""Health snapshot DTOs."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Dict

from pydantic import BaseModel, ConfigDict


class HealthStatus(StrEnum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Aggregate liveness and counter view of one catalog service."""

    model_config = ConfigDict(frozen=True)

    status: HealthStatus
    service: str
    version: str
    timestamp: datetime
    uptime: str
    environment: str
    metrics: Dict[str, int]
    dependencies: Dict[str, str]
