"""Namespace version tokens for O(1) cache invalidation.

A namespace (e.g. ``catalog:search:version``) holds an opaque token that
is embedded in every derived cache key.  Bumping the token makes the whole
key family unreachable; stale entries are never scanned or deleted, they
simply expire through their own TTL.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Union

import structlog
import uuid6

from shared.infrastructure.cache import CacheStore

logger = structlog.get_logger(__name__)

BASELINE_VERSION = "v1"
DEFAULT_VERSION_TTL = timedelta(days=30)


class CacheVersionRegistry:
    """Reads and advances version tokens stored in a ``CacheStore``.

    ``CacheUnavailable`` raised by the store propagates to the caller.
    """

    def __init__(
        self,
        store: CacheStore,
        ttl: Union[int, timedelta] = DEFAULT_VERSION_TTL,
    ) -> None:
        self._store = store
        self._ttl = ttl

    def get_version(self, namespace: str) -> str:
        """Return the current token, initialising it to the baseline if absent.

        Concurrent initialisations write the same baseline value.
        """
        raw = self._store.get(namespace)
        if raw:
            return raw.decode("utf-8")
        self._store.set(namespace, BASELINE_VERSION.encode("utf-8"), self._ttl)
        logger.info("cache_version.initialised", namespace=namespace)
        return BASELINE_VERSION

    def bump_version(self, namespace: str) -> str:
        """Persist and return a token distinct from every previous one.

        UUIDv7 is time-ordered with a random tail, so two bumps in the same
        millisecond (or from different processes) still differ.
        """
        token = f"v{uuid6.uuid7().hex}"
        self._store.set(namespace, token.encode("utf-8"), self._ttl)
        logger.info("cache_version.bumped", namespace=namespace, version=token)
        return token
