"""Catalog command handlers (write-then-invalidate).

Each mutation runs inside the repository's transaction boundary.  Only
after the transaction has committed does the handler invalidate the cache
(drop the product's point entry, bump the search version) and publish the
domain event.  Invalidation is best-effort: a cache outage never undoes a
committed write.

Expected failures (SKU conflict, unknown product) are returned as
``Result`` failures.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

import structlog
from django.utils import timezone

from modules.catalog.cache import CatalogCache
from modules.catalog.dtos import (
    CreateProductCommand,
    DeactivateProductCommand,
    ProductDTO,
    UpdateProductCommand,
)
from modules.catalog.exceptions import ProductAlreadyExists
from modules.catalog.models import Product
from modules.catalog.repositories.interfaces import IProductRepository
from shared.domain.bus import IEventBus
from shared.domain.cancellation import Deadline, ensure_not_cancelled
from shared.domain.events import DomainEvent
from shared.domain.result import Error, Result

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class _CommandHandler:
    def __init__(
        self,
        repository: IProductRepository,
        cache: CatalogCache,
        event_bus: IEventBus,
        clock: Clock = timezone.now,
    ) -> None:
        self._repo = repository
        self._cache = cache
        self._bus = event_bus
        self._clock = clock

    def _after_commit(self, product: Product, event: Optional[DomainEvent]) -> None:
        self._cache.invalidate_product(product.id)
        if event is not None:
            self._bus.publish(event)


class CreateProductHandler(_CommandHandler):
    def handle(
        self, command: CreateProductCommand, deadline: Optional[Deadline] = None
    ) -> Result[ProductDTO]:
        log = logger.bind(sku=command.sku)
        ensure_not_cancelled(deadline)

        try:
            with self._repo.atomic():
                if self._repo.exists_by_sku(command.sku):
                    log.warning("product.duplicate_sku")
                    return Result.failure(_sku_conflict(command.sku))
                product, event = Product.create(
                    sku=command.sku,
                    name=command.name,
                    description=command.description,
                    price=command.price,
                    currency=command.currency,
                    now=self._clock(),
                )
                self._repo.add(product)
        except ProductAlreadyExists:
            log.warning("product.duplicate_sku", detected_by="unique_index")
            return Result.failure(_sku_conflict(command.sku))

        self._after_commit(product, event)
        log.info("product.created", product_id=str(product.id))
        return Result.success(ProductDTO.from_entity(product))


class UpdateProductHandler(_CommandHandler):
    def handle(
        self, command: UpdateProductCommand, deadline: Optional[Deadline] = None
    ) -> Result[ProductDTO]:
        log = logger.bind(product_id=str(command.product_id))
        ensure_not_cancelled(deadline)

        with self._repo.atomic():
            product = self._repo.get_for_update(str(command.product_id))
            if product is None:
                return Result.failure(_not_found(command.product_id))
            event = product.update(
                name=command.name,
                description=command.description,
                price=command.price,
                currency=command.currency,
                now=self._clock(),
            )
            self._repo.save(product)

        self._after_commit(product, event)
        log.info("product.updated")
        return Result.success(ProductDTO.from_entity(product))


class DeactivateProductHandler(_CommandHandler):
    """Idempotent: deactivating an inactive product succeeds without a write."""

    def handle(
        self, command: DeactivateProductCommand, deadline: Optional[Deadline] = None
    ) -> Result[None]:
        log = logger.bind(product_id=str(command.product_id))
        ensure_not_cancelled(deadline)

        with self._repo.atomic():
            product = self._repo.get_for_update(str(command.product_id))
            if product is None:
                return Result.failure(_not_found(command.product_id))
            event = product.deactivate(self._clock())
            if event is not None:
                self._repo.save(product)

        self._after_commit(product, event)
        log.info("product.deactivated", changed=event is not None)
        return Result.success()


def _sku_conflict(sku: str) -> Error:
    return Error.conflict(f"Product with SKU '{sku}' already exists.")


def _not_found(product_id: object) -> Error:
    return Error.not_found(f"Product '{product_id}' was not found.")
