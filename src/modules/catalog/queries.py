"""Catalog query handlers (read-through cache).

- ``GetProductByIdHandler``: point lookup keyed by product id.
- ``SearchProductsHandler``: paginated search keyed by the current search
  version plus the normalised filters, so that any mutation (which bumps
  the version) makes every cached page unreachable at once.

Cache population is best-effort and skipped once the request deadline has
elapsed.
"""

from __future__ import annotations

from typing import Optional

import structlog

from modules.catalog.cache import CatalogCache
from modules.catalog.cache_keys import search_key
from modules.catalog.dtos import (
    GetProductByIdQuery,
    GetProductResponse,
    ProductDTO,
    ProductSearchPage,
    ProductSearchResponse,
    SearchProductsQuery,
)
from modules.catalog.repositories.interfaces import IProductRepository, ProductSearchFilters
from shared.domain.cancellation import Deadline, ensure_not_cancelled, is_cancelled
from shared.domain.result import Error, Result

logger = structlog.get_logger(__name__)


class GetProductByIdHandler:
    def __init__(self, repository: IProductRepository, cache: CatalogCache) -> None:
        self._repo = repository
        self._cache = cache

    def handle(
        self, query: GetProductByIdQuery, deadline: Optional[Deadline] = None
    ) -> Result[GetProductResponse]:
        cached = self._cache.get_product(query.product_id)
        if cached is not None:
            return Result.success(GetProductResponse(product=cached, cache_hit=True))

        ensure_not_cancelled(deadline)
        product = self._repo.get_by_id(str(query.product_id))
        if product is None:
            return Result.failure(
                Error.not_found(f"Product '{query.product_id}' was not found.")
            )

        dto = ProductDTO.from_entity(product)
        if not is_cancelled(deadline):
            self._cache.put_product(dto)
        return Result.success(GetProductResponse(product=dto, cache_hit=False))


class SearchProductsHandler:
    def __init__(self, repository: IProductRepository, cache: CatalogCache) -> None:
        self._repo = repository
        self._cache = cache

    def handle(
        self, query: SearchProductsQuery, deadline: Optional[Deadline] = None
    ) -> Result[ProductSearchResponse]:
        version = self._cache.search_version()
        key: Optional[str] = None
        if version is not None:
            key = search_key(
                version,
                query.is_active,
                query.min_price,
                query.max_price,
                query.q,
                query.page,
                query.page_size,
            )
            cached = self._cache.get_search_page(key)
            if cached is not None:
                return Result.success(ProductSearchResponse.from_page(cached, cache_hit=True))

        ensure_not_cancelled(deadline)
        filters = ProductSearchFilters(
            is_active=query.is_active,
            min_price=query.min_price,
            max_price=query.max_price,
            q=query.q,
        )
        total_count = self._repo.count(filters)
        products = self._repo.search(filters, offset=query.offset, limit=query.page_size)
        page = ProductSearchPage(
            items=[ProductDTO.from_entity(product) for product in products],
            total_count=total_count,
            page=query.page,
            page_size=query.page_size,
        )

        if key is not None and not is_cancelled(deadline):
            self._cache.put_search_page(key, page)
        logger.debug(
            "catalog.search.computed",
            total_count=total_count,
            returned=len(page.items),
            cached=key is not None,
        )
        return Result.success(ProductSearchResponse.from_page(page, cache_hit=False))
