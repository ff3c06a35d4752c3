"""Request deadlines.

A ``Deadline`` travels with a request through the handlers.  Handlers call
``check()`` before touching the store and consult ``expired`` before
writing to the cache, so an abandoned request leaves no partial cache
writes behind.

The deadline is cooperative.  It is only consulted between steps and is
not passed down as a timeout, so a store or cache call already in flight
runs to completion.  Those calls are bounded by the database connection
settings and by django-redis' ``SOCKET_CONNECT_TIMEOUT`` and
``SOCKET_TIMEOUT`` options.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional


class OperationCancelled(Exception):
    """The request deadline elapsed before the operation could proceed."""


@dataclass(frozen=True)
class Deadline:
    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        return cls(expires_at=time.monotonic() + seconds)

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self) -> None:
        if self.expired:
            raise OperationCancelled("Request deadline exceeded.")


def ensure_not_cancelled(deadline: Optional[Deadline]) -> None:
    if deadline is not None:
        deadline.check()


def is_cancelled(deadline: Optional[Deadline]) -> bool:
    return deadline is not None and deadline.expired
