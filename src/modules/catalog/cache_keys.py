"""Cache key derivation for the catalog.

Key layout (field order and formatting are part of the contract; changing
either orphans every previously cached search page)::

    catalog:product:<id as 32 hex chars>
    catalog:search:<version>:<active>:<min>:<max>:<query>:<page>:<page_size>

- ``active``: ``true`` / ``false`` / ``any``
- ``min`` / ``max``: price with exactly two decimals, or ``na``
- ``query``: trimmed, lower-cased, whitespace runs collapsed to ``_``, or
  ``none`` when blank.  Characters other than letters, digits, ``.``, ``-``
  and ``~`` (a literal ``_`` and ``:`` included) are percent-encoded, so
  distinct queries never produce the same key.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from urllib.parse import quote
from uuid import UUID

SEARCH_VERSION_KEY = "catalog:search:version"

PRODUCT_PREFIX = "catalog:product"
SEARCH_PREFIX = "catalog:search"

_WHITESPACE = re.compile(r"\s+")


def point_key(product_id: UUID) -> str:
    return f"{PRODUCT_PREFIX}:{product_id.hex}"


def _flag(value: Optional[bool]) -> str:
    if value is None:
        return "any"
    return "true" if value else "false"


def _price(value: Optional[Decimal]) -> str:
    if value is None:
        return "na"
    return str(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def normalise_query(query: Optional[str]) -> str:
    if query is None or not query.strip():
        return "none"
    words = _WHITESPACE.split(query.strip().lower())
    return "_".join(quote(word, safe="").replace("_", "%5F") for word in words)


def search_key(
    version: str,
    is_active: Optional[bool],
    min_price: Optional[Decimal],
    max_price: Optional[Decimal],
    query: Optional[str],
    page: int,
    page_size: int,
) -> str:
    return ":".join(
        (
            SEARCH_PREFIX,
            version,
            _flag(is_active),
            _price(min_price),
            _price(max_price),
            normalise_query(query),
            str(int(page)),
            str(int(page_size)),
        )
    )
