"""Gateway webhook handling.

``checkout.session.completed`` with a paid session confirms the order
correlated by ``session_id``: customer orders go through checkout
confirmation, delayed-payment orders through payment confirmation.
Every other event, and sessions matching no order, are acknowledged and
ignored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.payments.gateway.port import CHECKOUT_COMPLETED

if TYPE_CHECKING:
    from modules.cart.services import CheckoutService
    from modules.core.unit_of_work import IUnitOfWork
    from modules.orders.services import OrderService
    from modules.payments.gateway.port import PaymentGateway

logger = structlog.get_logger(__name__)

PROCESSED = "processed"
IGNORED = "ignored"


class PaymentWebhookService:
    def __init__(
        self,
        uow: IUnitOfWork,
        gateway: PaymentGateway,
        checkout: CheckoutService,
        orders: OrderService,
    ) -> None:
        self._uow = uow
        self._gateway = gateway
        self._checkout = checkout
        self._orders = orders

    def handle(self, payload: bytes, signature: str) -> str:
        """Process one webhook delivery; returns ``processed`` or ``ignored``.

        Raises:
            InvalidWebhookSignature: the payload failed verification.
            PaymentGatewayError: the session could not be re-read.
        """
        event = self._gateway.construct_webhook_event(payload, signature)
        log = logger.bind(event_type=event.event_type)

        session = event.session
        if event.event_type != CHECKOUT_COMPLETED or session is None or not session.is_paid:
            log.info("payment_webhook.ignored")
            return IGNORED

        log = log.bind(session_id=session.session_id)
        order = self._uow.order_headers.get_by_session_id(session.session_id)
        if order is None:
            log.warning("payment_webhook.unknown_session")
            return IGNORED

        if order.is_delayed_payment:
            self._orders.confirm_payment(order.id)
        else:
            self._checkout.confirm_order(order.id)
        log.info("payment_webhook.processed", order_id=str(order.id))
        return PROCESSED
