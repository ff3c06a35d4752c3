"""Domain events for the Catalog bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ProductCreated(DomainEvent):
    """Raised when a product is created."""

    sku: str


@dataclass(frozen=True)
class ProductUpdated(DomainEvent):
    """Raised when a product's name, description, price or currency change."""


@dataclass(frozen=True)
class ProductDeactivated(DomainEvent):
    """Raised when an active product is deactivated."""
