"""Unit tests for the transient-failure retry policy."""

from __future__ import annotations

import pytest
from django.db import OperationalError

from shared.infrastructure import retry
from shared.infrastructure.retry import StoreUnavailable, with_store_retry

pytestmark = pytest.mark.unit


class Flaky:
    def __init__(self, failures: int, exc: Exception | None = None) -> None:
        self.failures = failures
        self.calls = 0
        self.exc = exc or OperationalError("server closed the connection unexpectedly")

    @with_store_retry
    def read(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return "row"


@pytest.fixture()
def outside_transaction(monkeypatch):
    monkeypatch.setattr(retry, "_in_transaction", lambda: False)
    monkeypatch.setattr(retry, "close_old_connections", lambda: None)


@pytest.mark.usefixtures("outside_transaction")
class TestOutsideTransaction:
    def test_transient_failures_are_retried(self):
        flaky = Flaky(failures=2)

        assert flaky.read() == "row"
        assert flaky.calls == 3

    def test_exhausted_retries_raise_store_unavailable(self):
        flaky = Flaky(failures=10)

        with pytest.raises(StoreUnavailable):
            flaky.read()
        assert flaky.calls == 3

    def test_attempts_follow_settings(self, settings):
        settings.CATALOG_STORE_RETRY = {"ATTEMPTS": 5, "BACKOFF_SECONDS": 0}
        flaky = Flaky(failures=10)

        with pytest.raises(StoreUnavailable):
            flaky.read()
        assert flaky.calls == 5

    def test_non_transient_errors_are_not_retried(self):
        flaky = Flaky(failures=1, exc=ValueError("bad input"))

        with pytest.raises(ValueError):
            flaky.read()
        assert flaky.calls == 1


class TestInsideTransaction:
    def test_failure_surfaces_without_retry(self, monkeypatch):
        monkeypatch.setattr(retry, "_in_transaction", lambda: True)
        flaky = Flaky(failures=1)

        with pytest.raises(StoreUnavailable):
            flaky.read()
        assert flaky.calls == 1
