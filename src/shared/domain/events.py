"""Domain event base.

Aggregates return events from their state transitions instead of
collecting them on the instance; command handlers publish them once the
write has committed and the cache has been invalidated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict
from uuid import UUID

import uuid6


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    aggregate_id: UUID
    occurred_on: datetime = field(default_factory=_utcnow)
    event_id: UUID = field(default_factory=uuid6.uuid7)

    @property
    def event_name(self) -> str:
        return type(self).__name__

    def log_fields(self) -> Dict[str, str]:
        """Flat, JSON-friendly view of the event for structured logs."""
        return {
            "event_name": self.event_name,
            "event_id": str(self.event_id),
            "aggregate_id": str(self.aggregate_id),
            "occurred_on": self.occurred_on.isoformat(),
        }
