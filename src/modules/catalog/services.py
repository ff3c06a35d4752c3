"""Catalog application service (Use Cases).

``CatalogService`` is the entry point used by the API layer.  Each
operation accepts a plain payload, runs it through the dispatch pipeline
(validation → handler) and returns a ``Result``:

- ``create_product``      → ``Result[ProductDTO]``
- ``get_product_by_id``   → ``Result[GetProductResponse]``
- ``search_products``     → ``Result[ProductSearchResponse]``
- ``update_product``      → ``Result[ProductDTO]``
- ``deactivate_product``  → ``Result[None]``

Collaborators are injected; ``CatalogService.from_settings()`` wires the
Django repository, the configured cache and the process event bus.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from django.conf import settings

from modules.catalog.cache import CatalogCache
from modules.catalog.commands import (
    Clock,
    CreateProductHandler,
    DeactivateProductHandler,
    UpdateProductHandler,
)
from modules.catalog.dtos import (
    CreateProductCommand,
    DeactivateProductCommand,
    GetProductByIdQuery,
    GetProductResponse,
    ProductDTO,
    ProductSearchResponse,
    SearchProductsQuery,
    UpdateProductCommand,
)
from modules.catalog.queries import GetProductByIdHandler, SearchProductsHandler
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.catalog.repositories.interfaces import IProductRepository
from shared.application.pipeline import RequestDispatcher
from shared.domain.bus import IEventBus
from shared.domain.cancellation import Deadline
from shared.domain.result import Result
from shared.infrastructure.bus import event_bus
from shared.infrastructure.cache import CacheStore
from shared.infrastructure.cache_version import CacheVersionRegistry


class CatalogService:
    """Application service for the catalog use-cases."""

    def __init__(
        self,
        repository: IProductRepository,
        cache: CatalogCache,
        bus: IEventBus,
        clock: Optional[Clock] = None,
    ) -> None:
        command_options = {} if clock is None else {"clock": clock}
        self._dispatcher = RequestDispatcher()
        self._dispatcher.register(
            CreateProductCommand,
            CreateProductHandler(repository, cache, bus, **command_options),
        )
        self._dispatcher.register(
            UpdateProductCommand,
            UpdateProductHandler(repository, cache, bus, **command_options),
        )
        self._dispatcher.register(
            DeactivateProductCommand,
            DeactivateProductHandler(repository, cache, bus, **command_options),
        )
        self._dispatcher.register(GetProductByIdQuery, GetProductByIdHandler(repository, cache))
        self._dispatcher.register(SearchProductsQuery, SearchProductsHandler(repository, cache))

    @classmethod
    def from_settings(cls) -> CatalogService:
        options = settings.CATALOG_CACHE
        store = CacheStore(alias=options["ALIAS"])
        versions = CacheVersionRegistry(store, ttl=options["VERSION_TTL"])
        cache = CatalogCache(
            store,
            versions,
            product_ttl=options["PRODUCT_TTL"],
            search_ttl=options["SEARCH_TTL"],
        )
        return cls(repository=ProductDjangoRepository(), cache=cache, bus=event_bus)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(
        self, payload: Mapping[str, Any], deadline: Optional[Deadline] = None
    ) -> Result[ProductDTO]:
        return self._dispatcher.send(CreateProductCommand, payload, deadline=deadline)

    def update_product(
        self,
        product_id: Any,
        payload: Mapping[str, Any],
        deadline: Optional[Deadline] = None,
    ) -> Result[ProductDTO]:
        data = {**payload, "product_id": product_id}
        data.pop("productId", None)
        return self._dispatcher.send(UpdateProductCommand, data, deadline=deadline)

    def deactivate_product(
        self, product_id: Any, deadline: Optional[Deadline] = None
    ) -> Result[None]:
        return self._dispatcher.send(
            DeactivateProductCommand, {"product_id": product_id}, deadline=deadline
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product_by_id(
        self, product_id: Any, deadline: Optional[Deadline] = None
    ) -> Result[GetProductResponse]:
        return self._dispatcher.send(
            GetProductByIdQuery, {"product_id": product_id}, deadline=deadline
        )

    def search_products(
        self, payload: Optional[Mapping[str, Any]] = None, deadline: Optional[Deadline] = None
    ) -> Result[ProductSearchResponse]:
        return self._dispatcher.send(SearchProductsQuery, payload or {}, deadline=deadline)
