"""Request body decoding shared by the catalog views.

Shape validation (types, JSON structure) happens here and fails with a
DRF ``ValidationError`` (400 ``invalid_request``).  Business validation is
the service's job.
"""

from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from rest_framework import serializers

M = TypeVar("M", bound=BaseModel)


def parse_body(model: Type[M], data: Any) -> M:
    if not isinstance(data, dict):
        raise serializers.ValidationError({"body": ["Expected a JSON object."]})
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise serializers.ValidationError(
            {
                ".".join(str(part) for part in error["loc"]) or "body": [error["msg"]]
                for error in exc.errors(include_url=False)
            }
        ) from exc
