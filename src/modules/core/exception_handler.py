"""DRF exception handler rendering the standard error envelope.

Every failure leaves the API as::

    {"error": "<code>", "message": "...", "details": {...},
     "requestId": "<X-Request-ID>", "timestamp": "<iso8601>"}

Domain errors map to status codes by kind; DRF's own exceptions (parse
errors, query-parameter validation, 405...) keep their status and are
reshaped into the same envelope.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from modules.core.exceptions import (
    AlreadyExists,
    Cancelled,
    DomainError,
    Internal,
    NotFound,
    Unavailable,
    ValidationFailed,
)
from modules.core.middleware import correlation_id_var

logger = structlog.get_logger(__name__)

STATUS_BY_ERROR = {
    NotFound: status.HTTP_404_NOT_FOUND,
    AlreadyExists: status.HTTP_409_CONFLICT,
    ValidationFailed: status.HTTP_400_BAD_REQUEST,
    Unavailable: status.HTTP_410_GONE,
    Cancelled: status.HTTP_504_GATEWAY_TIMEOUT,
    Internal: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INVALID_REQUEST = "invalid_request"


def error_payload(
    code: str, message: str, details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": code, "message": message}
    if details:
        payload["details"] = details
    payload["requestId"] = correlation_id_var.get()
    payload["timestamp"] = timezone.now().isoformat()
    return payload


def status_for(exc: DomainError) -> int:
    for kind, code in STATUS_BY_ERROR.items():
        if isinstance(exc, kind):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def catalog_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    if isinstance(exc, DomainError):
        if isinstance(exc, Internal):
            logger.error(
                "request.internal_error",
                message=exc.message,
                cause=repr(exc.cause) if exc.cause else None,
            )
        return Response(
            error_payload(exc.code, exc.message, exc.details),
            status=status_for(exc),
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = error_payload(
            INVALID_REQUEST,
            "Check your request parameters and try again",
            {"fields": exc.detail},
        )
    elif isinstance(exc, APIException):
        code = INVALID_REQUEST if response.status_code == 400 else exc.default_code
        response.data = error_payload(code, str(exc.detail))
    return response
