"""Integration tests for CatalogService wired from settings.

Runs the full stack (dispatcher, handlers, Django repository, local-memory
cache) through the service facade, without HTTP.
"""

from __future__ import annotations

from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest
from django.core.cache import caches
from django.core.management import call_command

from modules.catalog.models import Product
from modules.catalog.services import CatalogService
from shared.domain.result import ErrorCode

pytestmark = pytest.mark.integration


@pytest.fixture()
def service():
    return CatalogService.from_settings()


def _create(service, sku="SKU_CACHE", name="Cache Widget", price="11.00"):
    result = service.create_product(
        {"sku": sku, "name": name, "price": price, "currency": "USD"}
    )
    assert result.is_success, result
    return result.value


class TestCatalogService:
    def test_point_lookup_scenario(self, service):
        created = _create(service)

        miss = service.get_product_by_id(created.id)
        hit = service.get_product_by_id(str(created.id))

        assert miss.value.cache_hit is False
        assert hit.value.cache_hit is True
        assert hit.value.product.price == Decimal("11.00")

    def test_search_reflects_new_products(self, service):
        _create(service)
        assert service.search_products().value.total_count == 1
        assert service.search_products().value.cache_hit is True

        _create(service, sku="SKU_SECOND", name="Another Widget")
        result = service.search_products()

        assert result.value.cache_hit is False
        assert result.value.total_count == 2

    def test_update_accepts_camel_case_payload(self, service):
        created = _create(service)

        result = service.update_product(
            created.id,
            {"productId": str(uuid4()), "name": "Renamed", "price": "2.00", "currency": "EUR"},
        )

        assert result.value.id == created.id
        assert Product.objects.get(id=created.id).name == "Renamed"

    def test_deactivate_twice(self, service):
        created = _create(service)

        assert service.deactivate_product(created.id).is_success
        first_stamp = Product.objects.get(id=created.id).updated_at
        assert service.deactivate_product(created.id).is_success

        assert Product.objects.get(id=created.id).updated_at == first_stamp

    def test_invalid_request_never_reaches_the_store(self, service):
        result = service.create_product({"sku": "bad sku"})

        assert result.error.code is ErrorCode.VALIDATION
        assert Product.objects.count() == 0

    def test_search_defaults(self, service):
        page = service.search_products(None).value
        assert (page.page, page.page_size, page.items) == (1, 20, [])

    def test_oversized_page_is_a_validation_failure(self, service):
        result = service.search_products({"page": 10**18, "pageSize": 100})

        assert result.error.code is ErrorCode.VALIDATION
        assert "page" in result.error.details

    def test_non_ascii_case_variants_share_results(self, service):
        _create(service, sku="SKU_UMLAUT", name="Ärger Widget")

        upper = service.search_products({"q": "ÄRGER"}).value
        caches["default"].clear()
        lower = service.search_products({"q": "ärger"}).value

        assert lower.cache_hit is False
        assert upper.total_count == lower.total_count == 1


class TestSeedCatalog:
    def test_seeds_products_and_users(self):
        out = StringIO()
        call_command("seed_catalog", stdout=out)

        assert Product.objects.count() == 8
        assert "products_created=8" in out.getvalue()

    def test_is_idempotent(self):
        call_command("seed_catalog", stdout=StringIO())
        out = StringIO()
        call_command("seed_catalog", stdout=out)

        assert Product.objects.count() == 8
        assert "products_skipped=8" in out.getvalue()
        assert "users=0" in out.getvalue()
