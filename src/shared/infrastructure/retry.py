"""Bounded retry for transient database failures.

Reads executed outside a transaction are retried with exponential backoff
(``settings.CATALOG_STORE_RETRY``).  Inside a transaction a broken
connection cannot be resumed, so the failure is surfaced immediately.
After the last attempt the error is raised as ``StoreUnavailable``.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

import structlog
from django.conf import settings
from django.db import InterfaceError, OperationalError, close_old_connections, connection
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger(__name__)

TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError)

F = TypeVar("F", bound=Callable[..., Any])


class StoreUnavailable(Exception):
    """The durable store failed after exhausting retries."""


def _in_transaction() -> bool:
    return connection.in_atomic_block


def _before_retry(retry_state: RetryCallState) -> None:
    close_old_connections()
    logger.warning(
        "store.retry",
        attempt=retry_state.attempt_number,
        error=repr(retry_state.outcome.exception()),
    )


def _retry_policy() -> Retrying:
    options = settings.CATALOG_STORE_RETRY
    backoff = options["BACKOFF_SECONDS"]
    return Retrying(
        stop=stop_after_attempt(options["ATTEMPTS"]),
        wait=wait_exponential(multiplier=backoff, min=backoff, max=backoff * 8),
        retry=retry_if_exception_type(TRANSIENT_DB_ERRORS),
        before_sleep=_before_retry,
        reraise=True,
    )


def with_store_retry(func: F) -> F:
    """Decorate a repository method with the transient-failure policy."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            if _in_transaction():
                return func(*args, **kwargs)
            return _retry_policy()(func, *args, **kwargs)
        except TRANSIENT_DB_ERRORS as exc:
            logger.error("store.unavailable", operation=func.__qualname__, error=repr(exc))
            raise StoreUnavailable(f"{func.__qualname__} failed: {exc}") from exc

    return wrapper  # type: ignore[return-value]
