"""Key/value cache adapter over Django's cache framework.

``CacheStore`` stores opaque ``bytes`` payloads under string keys.  Any
transport failure of the underlying backend (Redis connection refused,
socket timeout, ...) is raised as ``CacheUnavailable``; a failure is never
reported as a miss.  Callers decide whether to degrade or fail.

Timeouts are bounded by the backend configuration
(``SOCKET_CONNECT_TIMEOUT`` / ``SOCKET_TIMEOUT`` for django-redis).
"""

from __future__ import annotations

import math
from datetime import timedelta
from typing import Any, Optional, Union

from django.core.cache import caches
from django_redis.exceptions import ConnectionInterrupted
from redis.exceptions import RedisError

BACKEND_ERRORS = (ConnectionInterrupted, RedisError, ConnectionError, TimeoutError)

TTL = Union[int, float, timedelta]


class CacheUnavailable(Exception):
    """The cache backend could not serve the operation."""

    def __init__(self, operation: str, key: str, original: BaseException) -> None:
        self.operation = operation
        self.key = key
        self.original = original
        super().__init__(
            f"Cache {operation} failed for key '{key}': "
            f"{type(original).__name__}: {original}"
        )


def _seconds(ttl: TTL) -> int:
    if isinstance(ttl, timedelta):
        return math.ceil(ttl.total_seconds())
    return math.ceil(ttl)


class CacheStore:
    """``get`` / ``set`` with TTL / ``delete`` over ``bytes`` payloads.

    Wraps the Django cache named by ``alias``; a backend object exposing the
    same ``get``/``set``/``delete`` API may be injected instead.
    """

    def __init__(self, alias: str = "default", backend: Optional[Any] = None) -> None:
        self._alias = alias
        self._backend = backend

    @property
    def backend(self) -> Any:
        # Django cache handles are per-thread; resolve lazily on each access.
        if self._backend is not None:
            return self._backend
        return caches[self._alias]

    def get(self, key: str) -> Optional[bytes]:
        try:
            value = self.backend.get(key)
        except BACKEND_ERRORS as exc:
            raise CacheUnavailable("get", key, exc) from exc
        if value is None:
            return None
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    def set(self, key: str, payload: bytes, ttl: TTL) -> None:
        seconds = _seconds(ttl)
        if seconds <= 0:
            raise ValueError("Cache TTL must be positive.")
        try:
            self.backend.set(key, payload, timeout=seconds)
        except BACKEND_ERRORS as exc:
            raise CacheUnavailable("set", key, exc) from exc

    def delete(self, key: str) -> None:
        try:
            self.backend.delete(key)
        except BACKEND_ERRORS as exc:
            raise CacheUnavailable("delete", key, exc) from exc
