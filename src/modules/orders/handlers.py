"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.constants import PaymentStatus
from modules.orders.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentApproved,
)
from modules.orders.tasks import send_order_confirmation_email
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    """Company orders are confirmed at checkout, so they are e-mailed now."""

    def handle(self, event: OrderPlaced) -> None:
        logger.info(
            "order.event.placed",
            order_id=str(event.aggregate_id),
            payment_status=event.payment_status,
        )
        if event.payment_status == PaymentStatus.DELAYED_PAYMENT:
            send_order_confirmation_email.delay(str(event.aggregate_id))


class PaymentApprovedHandler(IEventHandler[PaymentApproved]):
    def handle(self, event: PaymentApproved) -> None:
        logger.info("order.event.payment_approved", order_id=str(event.aggregate_id))
        send_order_confirmation_email.delay(str(event.aggregate_id))


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=str(event.aggregate_id),
            refunded=event.refunded,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


order_placed_handler = OrderPlacedHandler()
payment_approved_handler = PaymentApprovedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_status_changed_handler = OrderStatusChangedHandler()
