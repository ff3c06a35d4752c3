import pytest

from django.contrib.auth import get_user_model
from django.core.cache import caches

from rest_framework.test import APIClient

from redis.exceptions import ConnectionError as RedisConnectionError


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """The local-memory cache outlives a test; start every test empty."""
    caches["default"].clear()
    yield
    caches["default"].clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(username="catalog", password="testpass123")
    client.force_authenticate(user=user)
    return client


class DownBackend:
    """Cache backend whose every call fails like an unreachable Redis."""

    def __init__(self) -> None:
        self.calls = 0

    def _fail(self):
        self.calls += 1
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    def get(self, key, default=None):
        self._fail()

    def set(self, key, value, timeout=None):
        self._fail()

    def delete(self, key):
        self._fail()


@pytest.fixture()
def down_backend():
    return DownBackend()


@pytest.fixture()
def cache_outage(monkeypatch, down_backend):
    """Route every ``CacheStore`` to a failing backend."""
    from shared.infrastructure.cache import CacheStore

    monkeypatch.setattr(CacheStore, "backend", property(lambda self: down_backend))
    return down_backend
