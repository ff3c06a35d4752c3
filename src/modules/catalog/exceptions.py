"""Catalog store exceptions.

Raised by the repository when the database rejects a write; handlers
translate them into ``Result`` failures.
"""

from __future__ import annotations


class ProductAlreadyExists(Exception):
    """A product with the same SKU already exists (unique index violation)."""

    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__(f"Product with SKU '{sku}' already exists.")
