"""Customer API views.

Exposes the ``CustomerService`` via HTTP using a DRF ViewSet.
Domain exceptions propagate to ``catalog_exception_handler``, which
translates them into status codes.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.serializers import parse_body
from modules.core.views import HTTP_STATUS_BY_HEALTH
from modules.customers.dtos import Customer
from modules.customers.providers import get_customer_service
from modules.customers.serializers import CustomerQuerySerializer


class CustomerViewSet(ViewSet):
    """ViewSet for the customer catalog.

    Uses the process-wide ``CustomerService`` so request/error counters
    are shared across requests.
    """

    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = get_customer_service()

    def _filters(self, request: Request):
        query = CustomerQuerySerializer(data=request.query_params.dict())
        query.is_valid(raise_exception=True)
        return query.to_filter()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/customers/"""
        listing = self._service.get_many(request.catalog_context, self._filters(request))
        return Response(listing.to_wire())

    @action(detail=False, methods=["get"])
    def active(self, request: Request) -> Response:
        """GET /api/v1/customers/active/"""
        listing = self._service.get_active(request.catalog_context, self._filters(request))
        return Response(listing.to_wire())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_one(request.catalog_context, pk)
        return Response(customer.to_wire())

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        customer = parse_body(Customer, request.data)
        created = self._service.create(request.catalog_context, customer)
        return Response(created.to_wire(), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/customers/{pk}/

        The path key wins over any ``customerId`` in the body.
        """
        customer = parse_body(Customer, request.data)
        customer.customer_id = pk
        updated = self._service.update(request.catalog_context, customer)
        return Response(updated.to_wire())

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete(request.catalog_context, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def health(self, request: Request) -> Response:
        """GET /api/v1/customers/health/"""
        snapshot = self._service.health_status(request.catalog_context)
        return Response(
            snapshot.model_dump(mode="json"),
            status=HTTP_STATUS_BY_HEALTH[snapshot.status],
        )

    @action(detail=False, methods=["get"])
    def metrics(self, request: Request) -> Response:
        """GET /api/v1/customers/metrics/"""
        return Response(self._service.metrics())
