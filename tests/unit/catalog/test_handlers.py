"""Unit tests for Catalog event handlers."""

from __future__ import annotations

import logging
from uuid import uuid4

import pytest

from modules.catalog.events import ProductCreated, ProductDeactivated, ProductUpdated
from modules.catalog.handlers import (
    ProductCreatedHandler,
    ProductDeactivatedHandler,
    ProductUpdatedHandler,
)
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit


def test_product_created_handler_logs(caplog):
    event = ProductCreated(aggregate_id=uuid4(), sku="SKU-LOG")

    with caplog.at_level(logging.INFO, logger="modules.catalog.handlers"):
        ProductCreatedHandler().handle(event)

    assert any("Product SKU-LOG created" in r.getMessage() for r in caplog.records)


def test_product_updated_handler_logs(caplog):
    event = ProductUpdated(aggregate_id=uuid4())

    with caplog.at_level(logging.INFO, logger="modules.catalog.handlers"):
        ProductUpdatedHandler().handle(event)

    assert any(f"Product {event.aggregate_id} updated" in r.getMessage() for r in caplog.records)


def test_product_deactivated_handler_logs(caplog):
    event = ProductDeactivated(aggregate_id=uuid4())

    with caplog.at_level(logging.INFO, logger="modules.catalog.handlers"):
        ProductDeactivatedHandler().handle(event)

    assert any(
        f"Product {event.aggregate_id} deactivated" in r.getMessage() for r in caplog.records
    )


def test_handlers_are_subscribed_on_startup(caplog):
    event = ProductCreated(aggregate_id=uuid4(), sku="SKU-BUS")

    with caplog.at_level(logging.INFO, logger="modules.catalog.handlers"):
        event_bus.publish(event)

    assert any("Product SKU-BUS created" in r.getMessage() for r in caplog.records)
