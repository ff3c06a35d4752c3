"""Integration tests for Product API endpoints.

Covers:
- create -> point lookup MISS then HIT, search MISS then HIT.
- search pages refresh after every mutation.
- update, deactivate (idempotent), not found, conflict.
- Authentication enforcement (401 without token on writes).
"""

from __future__ import annotations

from uuid import uuid4

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


def _payload(**overrides):
    data = {"sku": "SKU_CACHE", "name": "Cache Widget", "price": "11.00", "currency": "USD"}
    data.update(overrides)
    return data


def _create(client, **overrides):
    response = client.post(URL, _payload(**overrides), format="json")
    assert response.status_code == 201, response.content
    return response.json()


# ===========================================================================
# Authentication
# ===========================================================================


class TestProductAPIAuth:
    def test_anonymous_can_read(self, api_client):
        response = api_client.get(URL)
        assert response.status_code == 200

    def test_unauthenticated_write_returns_401(self, api_client):
        response = api_client.post(URL, _payload(), format="json")
        assert response.status_code == 401

    def test_unauthenticated_delete_returns_401(self, api_client):
        response = api_client.delete(f"{URL}{uuid4()}/")
        assert response.status_code == 401


# ===========================================================================
# Create / Retrieve
# ===========================================================================


class TestCreateAndRetrieve:
    def test_create_returns_201_with_location(self, auth_client):
        response = auth_client.post(URL, _payload(description="Cached"), format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["sku"] == "SKU_CACHE"
        assert data["price"] == "11.00"
        assert data["currency"] == "USD"
        assert data["isActive"] is True
        assert data["updatedAt"] is None
        assert response["Location"] == f"/api/v1/products/{data['id']}/"

    def test_point_lookup_miss_then_hit(self, auth_client, api_client):
        created = _create(auth_client)

        first = api_client.get(f"{URL}{created['id']}/")
        second = api_client.get(f"{URL}{created['id']}/")

        assert first.status_code == 200
        assert first["X-Cache"] == "MISS"
        assert first.json()["cacheHit"] is False
        assert second["X-Cache"] == "HIT"
        assert second.json()["cacheHit"] is True
        assert first.json()["product"] == second.json()["product"]
        assert second.json()["product"]["price"] == "11.00"

    def test_unknown_id_returns_404(self, api_client):
        response = api_client.get(f"{URL}{uuid4()}/")

        assert response.status_code == 404
        assert response.json()["errorCode"] == "catalog.not_found"

    def test_malformed_id_returns_400(self, api_client):
        response = api_client.get(f"{URL}not-a-uuid/")

        assert response.status_code == 400
        assert response.json()["errorCode"] == "validation.failed"

    def test_duplicate_sku_returns_409(self, auth_client):
        _create(auth_client)

        response = auth_client.post(URL, _payload(name="Other"), format="json")

        assert response.status_code == 409
        assert response.json()["errorCode"] == "catalog.conflict"

    def test_invalid_payload_returns_400_per_field(self, auth_client):
        response = auth_client.post(
            URL, _payload(sku="lower", price="0", currency="usd"), format="json"
        )

        assert response.status_code == 400
        attrs = {error["attr"] for error in response.json()["errors"]}
        assert {"sku", "price", "currency"} <= attrs


# ===========================================================================
# Search
# ===========================================================================


class TestSearch:
    def test_search_miss_then_hit(self, auth_client, api_client):
        _create(auth_client)

        first = api_client.get(URL, {"pageSize": 10})
        second = api_client.get(URL, {"pageSize": 10})

        assert first["X-Cache"] == "MISS"
        assert second["X-Cache"] == "HIT"
        body = second.json()
        assert body["totalCount"] == 1
        assert body["page"] == 1
        assert body["pageSize"] == 10
        assert [item["sku"] for item in body["items"]] == ["SKU_CACHE"]

    def test_create_refreshes_cached_search(self, auth_client, api_client):
        _create(auth_client)
        api_client.get(URL)
        assert api_client.get(URL)["X-Cache"] == "HIT"

        _create(auth_client, sku="SKU_SECOND", name="Another Widget")
        response = api_client.get(URL)

        assert response["X-Cache"] == "MISS"
        assert response.json()["totalCount"] == 2

    def test_filters(self, auth_client, api_client):
        _create(auth_client, sku="CHEAP", name="Cheap Widget", price="5.00")
        _create(auth_client, sku="PRICEY", name="Pricey Gadget", price="500.00")

        by_price = api_client.get(URL, {"minPrice": "10", "maxPrice": "1000"}).json()
        by_text = api_client.get(URL, {"q": "  WIDGET "}).json()

        assert [item["sku"] for item in by_price["items"]] == ["PRICEY"]
        assert [item["sku"] for item in by_text["items"]] == ["CHEAP"]

    def test_inactive_products_filtered(self, auth_client, api_client):
        created = _create(auth_client)
        auth_client.delete(f"{URL}{created['id']}/")

        active = api_client.get(URL, {"isActive": "true"}).json()
        inactive = api_client.get(URL, {"isActive": "false"}).json()

        assert active["totalCount"] == 0
        assert inactive["totalCount"] == 1

    @pytest.mark.parametrize("page_size", ["0", "101"])
    def test_page_size_out_of_range(self, api_client, page_size):
        response = api_client.get(URL, {"pageSize": page_size})

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "pageSize"

    def test_min_above_max(self, api_client):
        response = api_client.get(URL, {"minPrice": "10", "maxPrice": "5"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "__all__"


# ===========================================================================
# Update / Deactivate
# ===========================================================================


class TestUpdateAndDeactivate:
    def test_update_replaces_fields_and_refreshes_cache(self, auth_client, api_client):
        created = _create(auth_client)
        detail = f"{URL}{created['id']}/"
        api_client.get(detail)

        response = auth_client.put(
            detail,
            {"name": "Renamed", "price": "12.50", "currency": "EUR"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["sku"] == "SKU_CACHE"
        refreshed = api_client.get(detail)
        assert refreshed["X-Cache"] == "MISS"
        assert refreshed.json()["product"]["price"] == "12.50"

    def test_update_unknown_returns_404(self, auth_client):
        response = auth_client.put(
            f"{URL}{uuid4()}/",
            {"name": "Renamed", "price": "12.50", "currency": "EUR"},
            format="json",
        )
        assert response.status_code == 404

    def test_deactivate_is_idempotent(self, auth_client, api_client):
        created = _create(auth_client)
        detail = f"{URL}{created['id']}/"

        first = auth_client.delete(detail)
        product = api_client.get(detail).json()["product"]
        second = auth_client.delete(detail)

        assert first.status_code == 204
        assert second.status_code == 204
        assert product["isActive"] is False
        assert api_client.get(detail).json()["product"]["updatedAt"] == product["updatedAt"]

    def test_deactivate_unknown_returns_404(self, auth_client):
        response = auth_client.delete(f"{URL}{uuid4()}/")
        assert response.status_code == 404
