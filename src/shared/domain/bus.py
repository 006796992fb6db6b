"""Contracts between the outbox relay and order event handlers."""

from __future__ import annotations

from typing import List, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol[E]):
    def handle(self, event: E) -> None:
        """React to *event*; raising leaves the outbox row failed."""
        ...


class IEventBus(Protocol):
    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None: ...

    def handlers_for(self, event_class: Type[DomainEvent]) -> List[IEventHandler]: ...

    def publish(self, event: DomainEvent) -> None: ...
