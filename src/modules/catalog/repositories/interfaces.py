"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups the catalog handlers
need: SKU existence (uniqueness rule), locked reads for mutations, and
filtered/paginated search with a matching count.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.catalog.models import Product


@dataclass(frozen=True)
class ProductSearchFilters:
    is_active: Optional[bool] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    q: Optional[str] = None


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside ``atomic()``.  Returns ``None`` if the product
        does not exist.
        """

    @abstractmethod
    def exists_by_sku(self, sku: str) -> bool:
        """Whether a product already uses ``sku``."""

    @abstractmethod
    def search(
        self, filters: ProductSearchFilters, offset: int, limit: int
    ) -> List["Product"]:
        """Matching products ordered by name, sliced to one page."""

    @abstractmethod
    def count(self, filters: ProductSearchFilters) -> int:
        """Number of matching products before pagination."""
