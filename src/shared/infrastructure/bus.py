"""In-process event bus.

Order handlers subscribe in ``OrdersConfig.ready()``; the outbox relay
task is the only publisher.  A handler error propagates to the relay,
which marks the outbox row failed.
"""

from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict, List, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[DomainEvent], List[IEventHandler]] = defaultdict(list)

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        """Register *handler*; subscribing the same handler twice is ignored."""
        if handler not in self._handlers[event_class]:
            self._handlers[event_class].append(handler)

    def handlers_for(self, event_class: Type[DomainEvent]) -> List[IEventHandler]:
        return list(self._handlers.get(event_class, ()))

    def publish(self, event: DomainEvent) -> None:
        handlers = self.handlers_for(type(event))
        logger.debug(
            "event_bus.publish",
            event_name=event.event_name,
            aggregate_id=str(event.aggregate_id),
            handler_count=len(handlers),
        )
        for handler in handlers:
            handler.handle(event)


event_bus = InMemoryEventBus()
