import time
from typing import Any, Dict

import structlog
from django.conf import settings
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from shared.infrastructure.cache import CacheStore, CacheUnavailable

logger = structlog.get_logger()

HEALTH_KEY = "catalog:health"


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness of the durable store and the catalog cache.

    The catalog keeps serving reads while the cache is down, so a cache
    outage reports ``degraded`` (200) and only a database outage is 503.
    """
    services: Dict[str, Dict[str, Any]] = {}

    # Check database
    start = time.monotonic()
    try:
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {"status": "up", "response_time_ms": _elapsed_ms(start)}
    except DatabaseError:
        services["database"] = {"status": "down"}
        logger.error("health_check.database_down")

    # Check cache
    start = time.monotonic()
    store = CacheStore(alias=settings.CATALOG_CACHE["ALIAS"])
    try:
        store.set(HEALTH_KEY, b"ok", 10)
        if store.get(HEALTH_KEY) != b"ok":
            raise CacheUnavailable("get", HEALTH_KEY, ConnectionError("Cache read failed"))
        services["cache"] = {"status": "up", "response_time_ms": _elapsed_ms(start)}
    except CacheUnavailable:
        services["cache"] = {"status": "down"}
        logger.warning("health_check.cache_down")

    if services["database"]["status"] == "down":
        overall, status_code = "unhealthy", 503
    elif services["cache"]["status"] == "down":
        overall, status_code = "degraded", 200
    else:
        overall, status_code = "healthy", 200

    logger.info("health_check.completed", status=overall)

    return JsonResponse(
        {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=status_code,
    )
