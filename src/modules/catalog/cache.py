"""Best-effort caching for the catalog handlers.

``CatalogCache`` is the only place where cache failures are absorbed:
every ``CacheUnavailable`` is logged and turned into "miss" / "skip", so
a cache outage degrades reads to always-miss and never fails a request.
Payloads are pydantic JSON, which round-trips ``Decimal`` prices exactly.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Type, TypeVar, Union
from uuid import UUID

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from modules.catalog.cache_keys import SEARCH_VERSION_KEY, point_key
from modules.catalog.dtos import ProductDTO, ProductSearchPage
from shared.infrastructure.cache import CacheStore, CacheUnavailable
from shared.infrastructure.cache_version import CacheVersionRegistry

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_PRODUCT_TTL = timedelta(minutes=5)
DEFAULT_SEARCH_TTL = timedelta(minutes=2)


class CatalogCache:
    def __init__(
        self,
        store: CacheStore,
        versions: CacheVersionRegistry,
        product_ttl: Union[int, timedelta] = DEFAULT_PRODUCT_TTL,
        search_ttl: Union[int, timedelta] = DEFAULT_SEARCH_TTL,
    ) -> None:
        self._store = store
        self._versions = versions
        self._product_ttl = product_ttl
        self._search_ttl = search_ttl

    # ------------------------------------------------------------------
    # Point lookups
    # ------------------------------------------------------------------

    def get_product(self, product_id: UUID) -> Optional[ProductDTO]:
        return self._read(point_key(product_id), ProductDTO)

    def put_product(self, product: ProductDTO) -> None:
        self._write(point_key(product.id), product, self._product_ttl)

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    def search_version(self) -> Optional[str]:
        """Current search version, or ``None`` when the cache is down."""
        try:
            return self._versions.get_version(SEARCH_VERSION_KEY)
        except CacheUnavailable as exc:
            logger.warning("catalog.cache.unavailable", operation="get_version", error=str(exc))
            return None

    def get_search_page(self, key: str) -> Optional[ProductSearchPage]:
        return self._read(key, ProductSearchPage)

    def put_search_page(self, key: str, page: ProductSearchPage) -> None:
        self._write(key, page, self._search_ttl)

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def invalidate_product(self, product_id: UUID) -> None:
        """Drop the point entry and obsolete every cached search page.

        The two steps are independent: a failure of one does not skip the
        other.
        """
        key = point_key(product_id)
        try:
            self._store.delete(key)
        except CacheUnavailable as exc:
            logger.warning("catalog.cache.unavailable", operation="delete", key=key, error=str(exc))
        try:
            self._versions.bump_version(SEARCH_VERSION_KEY)
        except CacheUnavailable as exc:
            logger.warning(
                "catalog.cache.unavailable", operation="bump_version", error=str(exc)
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read(self, key: str, model: Type[M]) -> Optional[M]:
        try:
            raw = self._store.get(key)
        except CacheUnavailable as exc:
            logger.warning("catalog.cache.unavailable", operation="get", key=key, error=str(exc))
            return None
        if raw is None:
            logger.debug("catalog.cache.miss", key=key)
            return None
        try:
            value = model.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("catalog.cache.corrupt_entry", key=key)
            return None
        logger.debug("catalog.cache.hit", key=key)
        return value

    def _write(self, key: str, value: BaseModel, ttl: Union[int, timedelta]) -> None:
        payload = value.model_dump_json(by_alias=True).encode("utf-8")
        try:
            self._store.set(key, payload, ttl)
        except CacheUnavailable as exc:
            logger.warning("catalog.cache.unavailable", operation="set", key=key, error=str(exc))
