"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern for look-ups: methods
return ``None`` instead of raising, and the handlers decide how to turn a
missing entity into a ``Result``.  Transient database failures are retried
by ``with_store_retry`` and surface as ``StoreUnavailable``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from modules.catalog.exceptions import ProductAlreadyExists
from modules.catalog.filters import ProductSearchFilter
from modules.catalog.models import Product
from modules.catalog.repositories.interfaces import IProductRepository, ProductSearchFilters
from shared.infrastructure.retry import TRANSIENT_DB_ERRORS, StoreUnavailable, with_store_retry

logger = structlog.get_logger(__name__)


def _filter_data(filters: ProductSearchFilters) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if filters.is_active is not None:
        data["is_active"] = "true" if filters.is_active else "false"
    if filters.min_price is not None:
        data["min_price"] = str(filters.min_price)
    if filters.max_price is not None:
        data["max_price"] = str(filters.max_price)
    if filters.q:
        data["q"] = filters.q
    return data


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """``transaction.atomic`` with transient failures as ``StoreUnavailable``."""
        try:
            with transaction.atomic():
                yield
        except TRANSIENT_DB_ERRORS as exc:
            logger.error("store.unavailable", operation="atomic", error=repr(exc))
            raise StoreUnavailable(f"Transaction failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @with_store_retry
    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @with_store_retry
    def get_for_update(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @with_store_retry
    def exists_by_sku(self, sku: str) -> bool:
        return Product.objects.filter(sku=sku.strip()).exists()

    def _queryset(self, filters: ProductSearchFilters) -> QuerySet:
        filterset = ProductSearchFilter(
            data=_filter_data(filters), queryset=Product.objects.all()
        )
        return filterset.qs

    @with_store_retry
    def search(
        self, filters: ProductSearchFilters, offset: int, limit: int
    ) -> List[Product]:
        """Matching products ordered by ``name`` (then ``id`` for ties)."""
        queryset = self._queryset(filters).order_by("name", "id")
        return list(queryset[offset : offset + limit])

    @with_store_retry
    def count(self, filters: ProductSearchFilters) -> int:
        return self._queryset(filters).count()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add(self, entity: Product) -> Product:
        """Insert a new product.

        Raises:
            ProductAlreadyExists: if the SKU unique index rejects the row.
        """
        try:
            with transaction.atomic():
                entity.save(force_insert=True)
        except IntegrityError as exc:
            if Product.objects.filter(sku=entity.sku).exists():
                raise ProductAlreadyExists(entity.sku) from exc
            raise
        logger.info("product.inserted", product_id=str(entity.id), sku=entity.sku)
        return entity

    def save(self, entity: Product) -> Product:
        """Persist changes to an existing product."""
        entity.save(
            update_fields=[
                "name",
                "description",
                "price",
                "currency",
                "is_active",
                "search_text",
                "updated_at",
            ]
        )
        logger.info("product.saved", product_id=str(entity.id), sku=entity.sku)
        return entity
