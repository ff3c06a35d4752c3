"""In-memory implementation of ``IEventBus``."""

from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict, List, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    def __init__(self) -> None:
        self._subscriptions: DefaultDict[Type[DomainEvent], List[IEventHandler]] = defaultdict(
            list
        )

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        # AppConfig.ready() may run more than once (e.g. in tests).
        if handler not in self._subscriptions[event_class]:
            self._subscriptions[event_class].append(handler)

    def publish(self, event: DomainEvent) -> None:
        handlers = tuple(self._subscriptions.get(type(event), ()))
        logger.debug("event_bus.publish", handlers=len(handlers), **event.log_fields())
        for handler in handlers:
            handler.handle(event)


event_bus = InMemoryEventBus()
