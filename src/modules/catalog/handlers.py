"""Event handlers for Catalog domain events."""

from __future__ import annotations

import structlog

from modules.catalog.events import ProductCreated, ProductDeactivated, ProductUpdated
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class ProductCreatedHandler(IEventHandler[ProductCreated]):
    def handle(self, event: ProductCreated) -> None:
        logger.info(
            f"Product {event.sku} created",
            product_id=str(event.aggregate_id),
            sku=event.sku,
        )


class ProductUpdatedHandler(IEventHandler[ProductUpdated]):
    def handle(self, event: ProductUpdated) -> None:
        logger.info(
            f"Product {event.aggregate_id} updated",
            product_id=str(event.aggregate_id),
        )


class ProductDeactivatedHandler(IEventHandler[ProductDeactivated]):
    def handle(self, event: ProductDeactivated) -> None:
        logger.info(
            f"Product {event.aggregate_id} deactivated",
            product_id=str(event.aggregate_id),
        )


product_created_handler = ProductCreatedHandler()
product_updated_handler = ProductUpdatedHandler()
product_deactivated_handler = ProductDeactivatedHandler()
