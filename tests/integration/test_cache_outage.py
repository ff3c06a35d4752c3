"""Integration tests: the catalog keeps working while the cache is down."""

import logging

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


@pytest.mark.usefixtures("cache_outage")
class TestCacheOutage:
    def test_writes_succeed(self, auth_client):
        response = auth_client.post(
            URL,
            {"sku": "SKU-DOWN", "name": "Outage Widget", "price": "3.00", "currency": "USD"},
            format="json",
        )
        assert response.status_code == 201

    def test_reads_always_miss(self, auth_client, api_client):
        created = auth_client.post(
            URL,
            {"sku": "SKU-DOWN", "name": "Outage Widget", "price": "3.00", "currency": "USD"},
            format="json",
        ).json()

        lookups = [api_client.get(f"{URL}{created['id']}/") for _ in range(2)]
        searches = [api_client.get(URL) for _ in range(2)]

        for response in lookups + searches:
            assert response.status_code == 200
            assert response["X-Cache"] == "MISS"
        assert searches[-1].json()["totalCount"] == 1

    def test_outage_is_logged_as_warning(self, api_client, caplog):
        with caplog.at_level(logging.WARNING):
            api_client.get(URL)

        assert any(
            "catalog.cache.unavailable" in record.getMessage()
            and record.levelno == logging.WARNING
            for record in caplog.records
        )


def test_cache_recovery_resumes_hits(api_client, auth_client, monkeypatch, down_backend):
    from shared.infrastructure.cache import CacheStore

    with monkeypatch.context() as patch:
        patch.setattr(CacheStore, "backend", property(lambda self: down_backend))
        assert api_client.get(URL)["X-Cache"] == "MISS"

    assert api_client.get(URL)["X-Cache"] == "MISS"
    assert api_client.get(URL)["X-Cache"] == "HIT"
