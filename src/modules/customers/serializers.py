"""Customer DRF serializers for API input.

The serializer operates at the Interface layer (API Views).  It handles
HTTP-level concerns only: query-string parsing and bounds.  Business
validation lives in the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.core.repositories.filtering import MAX_PAGE_SIZE
from modules.customers.filters import CustomerFilter


class CustomerQuerySerializer(serializers.Serializer):
    """Query parameters for customer listings.

    Feed it ``request.query_params.dict()`` so an absent ``active`` stays
    absent instead of becoming ``False``.
    """

    active = serializers.BooleanField(required=False)
    email = serializers.CharField(required=False, allow_blank=True)
    tier = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(required=False, min_value=0, default=0)
    page_size = serializers.IntegerField(
        required=False, min_value=1, max_value=MAX_PAGE_SIZE
    )

    def to_filter(self) -> CustomerFilter:
        data = self.validated_data
        return CustomerFilter(
            active=data.get("active"),
            email=data.get("email", ""),
            customer_tier=data.get("tier", ""),
            page=data["page"],
            page_size=data.get("page_size", 0),
        )
