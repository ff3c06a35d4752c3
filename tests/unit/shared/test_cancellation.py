import time

import pytest

from shared.domain.cancellation import (
    Deadline,
    OperationCancelled,
    ensure_not_cancelled,
    is_cancelled,
)

pytestmark = pytest.mark.unit


def test_future_deadline_is_live():
    deadline = Deadline.after(60)

    assert not deadline.expired
    deadline.check()


def test_past_deadline_raises():
    deadline = Deadline(expires_at=time.monotonic() - 1)

    assert deadline.expired
    with pytest.raises(OperationCancelled):
        deadline.check()


def test_missing_deadline_never_cancels():
    ensure_not_cancelled(None)
    assert not is_cancelled(None)


def test_is_cancelled_follows_expiry():
    assert is_cancelled(Deadline(expires_at=0))
    assert not is_cancelled(Deadline.after(60))
