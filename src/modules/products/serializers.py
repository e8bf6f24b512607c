"""Product DRF serializers for API input.

Query-string parsing and bounds only; business validation lives in the
Service Layer.
"""

from __future__ import annotations

import math

from rest_framework import serializers

from modules.core.repositories.filtering import MAX_PAGE_SIZE
from modules.products.filters import ProductFilter


class ProductQuerySerializer(serializers.Serializer):
    """Query parameters for the product catalog.

    Feed it ``request.query_params.dict()`` so an absent ``active`` stays
    absent instead of becoming ``False``.
    """

    active = serializers.BooleanField(required=False)
    category = serializers.CharField(required=False, allow_blank=True)
    min_price = serializers.FloatField(required=False, min_value=0)
    max_price = serializers.FloatField(required=False, min_value=0)
    page = serializers.IntegerField(required=False, min_value=0, default=0)
    page_size = serializers.IntegerField(
        required=False, min_value=1, max_value=MAX_PAGE_SIZE
    )

    def validate(self, attrs):
        low, high = attrs.get("min_price"), attrs.get("max_price")
        for field, value in (("min_price", low), ("max_price", high)):
            if value is not None and not math.isfinite(value):
                raise serializers.ValidationError({field: "Must be a finite number."})
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError(
                {"min_price": "min_price cannot be greater than max_price."}
            )
        return attrs

    def to_filter(self) -> ProductFilter:
        data = self.validated_data
        return ProductFilter(
            active=data.get("active"),
            category=data.get("category", ""),
            min_price=data.get("min_price"),
            max_price=data.get("max_price"),
            page=data["page"],
            page_size=data.get("page_size", 0),
        )
