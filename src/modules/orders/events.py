"""Domain events for the Orders bounded context.

Fields other than ``aggregate_id`` carry plain strings so the events
survive the JSON round trip through the outbox.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised when checkout creates an order."""

    user_id: str = ""
    order_total: str = ""
    payment_status: str = ""


@dataclass(frozen=True)
class PaymentApproved(DomainEvent):
    """Raised when the gateway reports the order as paid."""

    payment_intent_id: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    refunded: bool = False
