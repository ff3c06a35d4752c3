"""Catalog request and response DTOs.

Framework-agnostic data transfer objects using Pydantic v2.  All DTOs are
immutable (``frozen=True``) and accept both snake_case names and the
camelCase aliases used on the wire.

Requests (validated by the dispatch pipeline before reaching a handler):

- ``CreateProductCommand`` / ``UpdateProductCommand`` /
  ``DeactivateProductCommand``
- ``GetProductByIdQuery`` / ``SearchProductsQuery``

Responses and cache payloads:

- ``ProductDTO``: product snapshot, also the point-lookup cache payload.
- ``ProductSearchPage``: one page of search results, the search cache payload.
- ``GetProductResponse`` / ``ProductSearchResponse``: read results plus the
  ``cache_hit`` flag.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from modules.catalog.models import Product

SKU_PATTERN = r"^[A-Z0-9_-]+$"
CURRENCY_PATTERN = r"^[A-Z]{3}$"
MAX_PAGE_SIZE = 100
# Keeps the row offset far below the 64-bit OFFSET limit of the store.
MAX_PAGE = 1_000_000
DEFAULT_PAGE_SIZE = 20

_WHITESPACE = re.compile(r"\s+")


class CatalogModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class _ProductFields(CatalogModel):
    """Rules shared by create and update."""

    name: str = Field(max_length=128)
    description: Optional[str] = Field(default=None, max_length=2048)
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    currency: str = Field(pattern=CURRENCY_PATTERN)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty.")
        return v

    @field_validator("description")
    @classmethod
    def blank_description_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("price")
    @classmethod
    def price_has_two_decimals(cls, v: Decimal) -> Decimal:
        return v.quantize(Decimal("0.01"))


class CreateProductCommand(_ProductFields):
    sku: str = Field(min_length=1, max_length=32, pattern=SKU_PATTERN)


class UpdateProductCommand(_ProductFields):
    """Full replacement of the mutable fields; the SKU never changes."""

    product_id: UUID


class DeactivateProductCommand(CatalogModel):
    product_id: UUID


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class GetProductByIdQuery(CatalogModel):
    product_id: UUID


class SearchProductsQuery(CatalogModel):
    """Filtered, paginated search.

    ``q`` is trimmed and its whitespace runs collapsed so that it matches
    exactly what the cache key encodes.
    """

    is_active: Optional[bool] = None
    min_price: Optional[Decimal] = Field(default=None, decimal_places=2)
    max_price: Optional[Decimal] = Field(default=None, decimal_places=2)
    q: Optional[str] = None
    page: int = Field(default=1, ge=1, le=MAX_PAGE)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @field_validator("q")
    @classmethod
    def normalise_query(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = _WHITESPACE.sub(" ", v.strip())
        return v or None

    @model_validator(mode="after")
    def price_bounds_are_ordered(self) -> SearchProductsQuery:
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("minPrice must be less than or equal to maxPrice.")
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# ---------------------------------------------------------------------------
# Output / cache payloads
# ---------------------------------------------------------------------------


class ProductDTO(CatalogModel):
    id: UUID
    sku: str
    name: str
    description: Optional[str]
    price: Decimal
    currency: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime]

    @classmethod
    def from_entity(cls, product: Product) -> ProductDTO:
        """Build a DTO from a Product model instance."""
        return cls(
            id=product.id,
            sku=product.sku,
            name=product.name,
            description=product.description,
            price=product.price,
            currency=product.currency,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductSearchPage(CatalogModel):
    items: list[ProductDTO]
    total_count: int
    page: int
    page_size: int


class GetProductResponse(CatalogModel):
    product: ProductDTO
    cache_hit: bool


class ProductSearchResponse(ProductSearchPage):
    cache_hit: bool

    @classmethod
    def from_page(cls, page: ProductSearchPage, cache_hit: bool) -> ProductSearchResponse:
        return cls(
            items=page.items,
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
            cache_hit=cache_hit,
        )
