from typing import Dict

import structlog
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.core.health import HealthResponse, HealthStatus
from modules.customers.providers import get_customer_service
from modules.products.providers import get_product_service

logger = structlog.get_logger()

HTTP_STATUS_BY_HEALTH = {
    HealthStatus.HEALTHY: 200,
    HealthStatus.DEGRADED: 206,
    HealthStatus.UNHEALTHY: 503,
}

_SEVERITY = [HealthStatus.HEALTHY, HealthStatus.DEGRADED, HealthStatus.UNHEALTHY]


def health_check(request: HttpRequest) -> JsonResponse:
    """Aggregate health of both catalog services; worst status wins."""
    ctx = request.catalog_context
    services: Dict[str, HealthResponse] = {
        "customers": get_customer_service().health_status(ctx),
        "products": get_product_service().health_status(ctx),
    }
    overall = max((s.status for s in services.values()), key=_SEVERITY.index)

    logger.info("health_check_completed", status=overall)

    return JsonResponse(
        {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "services": {
                name: snapshot.model_dump(mode="json")
                for name, snapshot in services.items()
            },
        },
        status=HTTP_STATUS_BY_HEALTH[overall],
    )
