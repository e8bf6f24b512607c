"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions propagate to ``catalog_exception_handler``.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.serializers import parse_body
from modules.core.views import HTTP_STATUS_BY_HEALTH
from modules.products.dtos import Product
from modules.products.providers import get_product_service
from modules.products.serializers import ProductQuerySerializer


class ProductViewSet(ViewSet):
    """ViewSet for the product catalog."""

    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = get_product_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        query = ProductQuerySerializer(data=request.query_params.dict())
        query.is_valid(raise_exception=True)
        catalog = self._service.get_many(request.catalog_context, query.to_filter())
        return Response(catalog.to_wire())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_one(request.catalog_context, pk)
        return Response(product.to_wire())

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        product = parse_body(Product, request.data)
        created = self._service.create(request.catalog_context, product)
        return Response(created.to_wire(), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/"""
        product = parse_body(Product, request.data)
        product.product_id = pk
        updated = self._service.update(request.catalog_context, product)
        return Response(updated.to_wire())

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        self._service.delete(request.catalog_context, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def health(self, request: Request) -> Response:
        """GET /api/v1/products/health/"""
        snapshot = self._service.health_status(request.catalog_context)
        return Response(
            snapshot.model_dump(mode="json"),
            status=HTTP_STATUS_BY_HEALTH[snapshot.status],
        )

    @action(detail=False, methods=["get"])
    def metrics(self, request: Request) -> Response:
        """GET /api/v1/products/metrics/"""
        return Response(self._service.metrics())
