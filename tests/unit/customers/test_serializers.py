"""Unit tests for the customer query serializer and body parsing."""

from __future__ import annotations

import pytest
from rest_framework import serializers

from modules.core.serializers import parse_body
from modules.customers.dtos import Customer
from modules.customers.serializers import CustomerQuerySerializer

pytestmark = pytest.mark.unit


def _filter(params):
    query = CustomerQuerySerializer(data=params)
    query.is_valid(raise_exception=True)
    return query.to_filter()


class TestCustomerQuerySerializer:
    def test_empty_query(self):
        filters = _filter({})
        assert filters.active is None
        assert filters.email == ""
        assert filters.page == 0
        assert not filters.paginated

    def test_all_parameters(self):
        filters = _filter(
            {"active": "true", "email": "ana", "tier": "VIP", "page": "2", "page_size": "10"}
        )
        assert filters.active is True
        assert filters.email == "ana"
        assert filters.customer_tier == "VIP"
        assert filters.page == 2
        assert filters.page_size == 10

    def test_active_false(self):
        assert _filter({"active": "false"}).active is False

    @pytest.mark.parametrize(
        "params",
        [
            {"page": "-1"},
            {"page_size": "0"},
            {"page_size": "101"},
            {"page": "abc"},
            {"active": "maybe"},
        ],
    )
    def test_invalid_parameters(self, params):
        query = CustomerQuerySerializer(data=params)
        assert not query.is_valid()


class TestParseBody:
    def test_valid_body(self):
        customer = parse_body(Customer, {"customerId": "c", "name": "N"})
        assert customer.customer_id == "c"

    def test_non_object_body(self):
        with pytest.raises(serializers.ValidationError) as exc_info:
            parse_body(Customer, ["not", "an", "object"])
        assert "body" in exc_info.value.detail

    def test_type_errors_are_keyed_by_field(self):
        with pytest.raises(serializers.ValidationError) as exc_info:
            parse_body(Customer, {"customerId": "c", "loyaltyPoints": "lots"})
        assert "loyaltyPoints" in exc_info.value.detail
