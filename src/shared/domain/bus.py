"""Ports for synchronous, in-process event delivery.

Handlers run in subscription order on the publishing thread; an exception
raised by a handler propagates to the publisher.
"""

from __future__ import annotations

from typing import Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol[E]):
    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        """Register ``handler`` for exactly ``event_class`` (no subclass dispatch)."""

    def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to its handlers."""
