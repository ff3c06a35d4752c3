"""Catalog API views.

Thin HTTP adapter over ``CatalogService``: request data goes in as a plain
payload, the returned ``Result`` is mapped to a response.  Failures are
rendered by ``problem_response``; read responses carry ``X-Cache``.
"""

from __future__ import annotations

from typing import Any, Dict

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.catalog.services import CatalogService
from modules.core.responses import problem_response
from shared.domain.cancellation import Deadline
from shared.domain.result import Result

CACHE_HEADER = "X-Cache"


def _deadline() -> Deadline:
    return Deadline.after(settings.CATALOG_REQUEST_TIMEOUT)


def _query_payload(request: Request) -> Dict[str, Any]:
    return {key: value for key, value in request.query_params.items() if value != ""}


def _body(request: Request) -> Dict[str, Any]:
    data = request.data
    if hasattr(data, "dict"):
        data = data.dict()
    return dict(data) if isinstance(data, dict) else {}


def _cached_response(result: Result) -> Response:
    value = result.value
    response = Response(value.model_dump(mode="json", by_alias=True))
    response[CACHE_HEADER] = "HIT" if value.cache_hit else "MISS"
    return response


class ProductViewSet(ViewSet):
    """ViewSet for the catalog operations.

    ``list`` is the search endpoint and ``destroy`` deactivates; products
    are never removed.
    """

    permission_classes = [IsAuthenticatedOrReadOnly]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CatalogService.from_settings()

    # ------------------------------------------------------------------
    # Search / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?isActive=&minPrice=&maxPrice=&q=&page=&pageSize="""
        result = self._service.search_products(_query_payload(request), deadline=_deadline())
        if result.is_failure:
            return problem_response(result.error)
        return _cached_response(result)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        result = self._service.get_product_by_id(pk, deadline=_deadline())
        if result.is_failure:
            return problem_response(result.error)
        return _cached_response(result)

    # ------------------------------------------------------------------
    # Create / Update / Deactivate
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        result = self._service.create_product(_body(request), deadline=_deadline())
        if result.is_failure:
            return problem_response(result.error)
        product = result.value
        response = Response(
            product.model_dump(mode="json", by_alias=True),
            status=status.HTTP_201_CREATED,
        )
        response["Location"] = f"/api/v1/products/{product.id}/"
        return response

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/"""
        result = self._service.update_product(pk, _body(request), deadline=_deadline())
        if result.is_failure:
            return problem_response(result.error)
        return Response(result.value.model_dump(mode="json", by_alias=True))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        result = self._service.deactivate_product(pk, deadline=_deadline())
        if result.is_failure:
            return problem_response(result.error)
        return Response(status=status.HTTP_204_NO_CONTENT)
