"""Product aggregate.

Business rules implemented:
- SKU is unique (enforced by a UNIQUE INDEX, translated into a conflict by
  the repository).
- Price is positive with two fractional digits (application + DB constraint).
- Products are never hard-deleted; ``deactivate`` flips ``is_active``.
- ``search_text`` holds the lower-cased SKU, name and description; free-text
  search matches against it so case folding never depends on the database.
- ``deactivate`` is idempotent: an inactive product is left untouched and
  ``updated_at`` keeps its first deactivation timestamp.

State transitions return the domain event they produce instead of
collecting events on the instance.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.db import models

from modules.catalog.events import ProductCreated, ProductDeactivated, ProductUpdated
from modules.core.models import BaseModel

PRICE_QUANTUM = Decimal("0.01")


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Product(BaseModel):
    sku = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=128)
    description = models.CharField(max_length=2048, null=True, blank=True, default=None)  # noqa: DJ01
    price = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3)
    is_active = models.BooleanField(default=True)
    search_text = models.TextField(default="", editable=False)

    class Meta:
        db_table = "catalog_products"
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["is_active", "name"], name="catalog_active_name_idx"),
            models.Index(fields=["price"], name="catalog_price_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="catalog_products_price_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        sku: str,
        name: str,
        description: Optional[str],
        price: Decimal,
        currency: str,
        now: datetime,
    ) -> tuple[Product, ProductCreated]:
        """Build a new active product stamped with ``now``."""
        product = cls(
            sku=sku.strip(),
            name=name.strip(),
            description=_clean_text(description),
            price=price.quantize(PRICE_QUANTUM),
            currency=currency.strip().upper(),
            is_active=True,
            created_at=now,
            updated_at=None,
        )
        product._refresh_search_text()
        return product, ProductCreated(
            aggregate_id=product.id, sku=product.sku, occurred_on=now
        )

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def update(
        self,
        name: str,
        description: Optional[str],
        price: Decimal,
        currency: str,
        now: datetime,
    ) -> ProductUpdated:
        self.name = name.strip()
        self.description = _clean_text(description)
        self.price = price.quantize(PRICE_QUANTUM)
        self.currency = currency.strip().upper()
        self.updated_at = now
        self._refresh_search_text()
        return ProductUpdated(aggregate_id=self.id, occurred_on=now)

    def deactivate(self, now: datetime) -> Optional[ProductDeactivated]:
        """Deactivate the product; returns ``None`` when it already was."""
        if not self.is_active:
            return None
        self.is_active = False
        self.updated_at = now
        return ProductDeactivated(aggregate_id=self.id, occurred_on=now)

    def _refresh_search_text(self) -> None:
        # Same folding as the search cache key, one field per line.
        parts = (self.sku, self.name, self.description or "")
        self.search_text = "\n".join(part.lower() for part in parts)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"
