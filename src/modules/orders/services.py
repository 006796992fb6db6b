"""Order service layer (Use Cases).

Orchestrates order management after checkout: listing, staff updates,
the processing/shipping/cancellation lifecycle, and payments through the
payment gateway.  All writes run inside the unit of work's transaction.

Business rules enforced:
- Staff (Admin/Employee) see every order; other users only their own.
- Order status transitions are validated against ``VALID_TRANSITIONS``.
- Shipping a delayed-payment order starts its payment term
  (``DELAYED_PAYMENT_DAYS``).
- Cancelling a paid order refunds it through the gateway first.
- Every status change is recorded in the history (``signals.py``) and
  produces an outbox event.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

import structlog
from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from modules.core.permissions import is_staff_member
from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.dtos import SHIPPING_FIELDS
from modules.orders.events import OrderCancelled, OrderStatusChanged, PaymentApproved
from modules.orders.exceptions import InvalidOrderStatus, OrderNotFound
from modules.payments.exceptions import PaymentGatewayError
from modules.payments.gateway.port import (
    REFUND_REASON_REQUESTED_BY_CUSTOMER,
    CheckoutLineItem,
)

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.core.unit_of_work import IUnitOfWork
    from modules.orders.dtos import ShipOrderDTO, UpdateOrderDetailsDTO
    from modules.orders.models import OrderDetail, OrderHeader
    from modules.payments.gateway.port import CheckoutSession, PaymentGateway

logger = structlog.get_logger(__name__)


def line_items_for(details: Iterable[OrderDetail]) -> List[CheckoutLineItem]:
    """Gateway line items for the details of an order."""
    return [
        CheckoutLineItem(
            name=detail.product.title,
            unit_amount=detail.price,
            quantity=detail.count,
        )
        for detail in details
    ]


class OrderService:
    """Application service for order management use-cases.

    Receives the unit of work and the payment gateway via constructor
    injection (DIP).
    """

    def __init__(self, uow: IUnitOfWork, gateway: PaymentGateway) -> None:
        self._uow = uow
        self._gateway = gateway

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_orders(self, user: Any, status: Optional[str] = None) -> QuerySet:
        """Orders visible to *user*, narrowed by the ``status`` tab filter."""
        user_id = None if is_staff_member(user) else user.pk
        return self._uow.order_headers.list_for_user(user_id, status)

    def get_order(self, order_id: Any, user: Any = None) -> OrderHeader:
        """Retrieve an order with its details.

        ``user=None`` means a system caller (webhook) and skips the
        ownership check.

        Raises:
            OrderNotFound: the order does not exist or is not visible to *user*.
        """
        order = self._uow.order_headers.get_with_details(order_id)
        if order is None or not self._can_view(order, user):
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    # ------------------------------------------------------------------
    # Staff commands
    # ------------------------------------------------------------------

    def update_order_details(
        self, order_id: Any, dto: UpdateOrderDetailsDTO, user: Any = None
    ) -> OrderHeader:
        """Overwrite the shipping block; carrier/tracking only when supplied.

        Raises:
            OrderNotFound: the order does not exist.
        """
        with self._uow.atomic():
            order = self._lock(order_id)
            for field in SHIPPING_FIELDS:
                setattr(order, field, getattr(dto, field))
            if dto.carrier:
                order.carrier = dto.carrier
            if dto.tracking_number:
                order.tracking_number = dto.tracking_number
            self._uow.order_headers.save(order)

        logger.info("order.details_updated", order_id=str(order_id))
        return self.get_order(order_id)

    def start_processing(self, order_id: Any, user: Any = None) -> OrderHeader:
        """Raises:
        OrderNotFound: the order does not exist.
        InvalidOrderStatus: the order is not Approved.
        """
        with self._uow.atomic():
            order = self._lock(order_id)
            self._change_status(order, OrderStatus.IN_PROCESS, user, "Processing started")
            self._uow.order_headers.save(order)
        return self.get_order(order_id)

    def ship_order(self, order_id: Any, dto: ShipOrderDTO, user: Any = None) -> OrderHeader:
        """Mark an order shipped with its carrier and tracking number.

        Delayed-payment orders get ``payment_due_date = now +
        DELAYED_PAYMENT_DAYS``.

        Raises:
            OrderNotFound: the order does not exist.
            InvalidOrderStatus: the order is not In Process.
        """
        with self._uow.atomic():
            order = self._lock(order_id)
            self._change_status(order, OrderStatus.SHIPPED, user, "Order shipped")
            now = timezone.now()
            order.carrier = dto.carrier
            order.tracking_number = dto.tracking_number
            order.shipping_date = now
            if order.is_delayed_payment:
                order.payment_due_date = now + timedelta(days=settings.DELAYED_PAYMENT_DAYS)
            self._uow.order_headers.save(order)

        logger.info("order.shipped", order_id=str(order_id), carrier=dto.carrier)
        return self.get_order(order_id)

    def cancel_order(self, order_id: Any, user: Any = None) -> OrderHeader:
        """Cancel an order, refunding it when the payment was approved.

        Raises:
            OrderNotFound: the order does not exist.
            InvalidOrderStatus: the order is already shipped or closed.
            PaymentGatewayError: the refund was rejected; nothing changes.
        """
        with self._uow.atomic():
            order = self._lock(order_id)
            log = logger.bind(order_id=str(order_id), payment_status=order.payment_status)
            self._guard(order, OrderStatus.CANCELLED)

            refunded = order.payment_status == PaymentStatus.APPROVED
            if refunded:
                result = self._gateway.create_refund(
                    order.payment_intent_id, REFUND_REASON_REQUESTED_BY_CUSTOMER
                )
                if not result.success:
                    log.warning("order.refund_failed", reason=result.failure_reason)
                    raise PaymentGatewayError(result.failure_reason or "Refund failed.")
                log.info("order.refunded", refund_id=result.gateway_refund_id)

            order.order_status = OrderStatus.CANCELLED
            order.payment_status = (
                PaymentStatus.REFUNDED if refunded else PaymentStatus.CANCELLED
            )
            order._status_change_notes = "Order cancelled and refunded" if refunded else "Order cancelled"
            order._status_changed_by = user
            order.add_domain_event(OrderCancelled(aggregate_id=order.id, refunded=refunded))
            try:
                self._uow.order_headers.save(order)
            except DatabaseError:
                # the gateway refund cannot be rolled back with the transaction
                if refunded:
                    log.error(
                        "order.refunded_but_not_cancelled",
                        refund_id=result.gateway_refund_id,
                        payment_intent_id=order.payment_intent_id,
                    )
                raise

        log.info("order.cancelled", refunded=refunded)
        return self.get_order(order_id)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def pay_now(self, order_id: Any, user: Any = None) -> CheckoutSession:
        """Open a gateway session for a delayed-payment (company) order.

        Raises:
            OrderNotFound: the order does not exist or is not visible to *user*.
            InvalidOrderStatus: the order is not on delayed payment terms.
            PaymentGatewayError: the gateway rejected the session.
        """
        order = self.get_order(order_id, user)
        if not order.is_delayed_payment:
            raise InvalidOrderStatus("Only orders approved for delayed payment can be paid now.")

        session = self._gateway.create_checkout_session(
            line_items_for(order.details.all()),
            success_url=f"{settings.SITE_DOMAIN}/orders/{order.id}/payment-confirmation/",
            cancel_url=f"{settings.SITE_DOMAIN}/orders/{order.id}/",
            reference=str(order.id),
        )
        with self._uow.atomic():
            self._uow.order_headers.update_payment_identifiers(
                order.id, session.session_id, session.payment_intent_id
            )
        logger.info("order.payment_session_created", order_id=str(order.id), session_id=session.session_id)
        return session

    def confirm_payment(self, order_id: Any, user: Any = None) -> OrderHeader:
        """Settle a delayed-payment order whose gateway session is paid.

        The order status is kept; only the payment becomes Approved.
        """
        order = self.get_order(order_id, user)
        if order.is_delayed_payment and order.session_id:
            session = self._gateway.retrieve_checkout_session(order.session_id)
            if session.is_paid:
                with self._uow.atomic():
                    self.record_payment(order, session, order.order_status, changed_by=user)
        return self.get_order(order_id)

    def record_payment(
        self,
        order: OrderHeader,
        session: CheckoutSession,
        order_status: str,
        changed_by: Any = None,
    ) -> bool:
        """Store the paid session's identifiers and approve the payment.

        Runs inside the caller's transaction.  The header is re-read under
        its row lock; when another confirmation already moved the payment
        away from ``order.payment_status`` nothing is written and ``False``
        is returned.
        """
        headers = self._uow.order_headers
        locked = headers.get_for_update(order.id)
        if locked is None or locked.payment_status != order.payment_status:
            logger.info(
                "order.payment_already_recorded",
                order_id=str(order.id),
                payment_status=getattr(locked, "payment_status", None),
            )
            return False

        headers.update_payment_identifiers(order.id, session.session_id, session.payment_intent_id)
        headers.update_status(
            order.id,
            order_status,
            PaymentStatus.APPROVED,
            notes="Payment received",
            changed_by=changed_by,
        )
        order.refresh_from_db()
        order.add_domain_event(
            PaymentApproved(
                aggregate_id=order.id,
                payment_intent_id=session.payment_intent_id or "",
            )
        )
        headers.record_events(order)
        logger.info(
            "order.payment_approved",
            order_id=str(order.id),
            order_status=order_status,
        )
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _can_view(order: OrderHeader, user: Any) -> bool:
        if user is None or is_staff_member(user):
            return True
        return order.user_id == user.pk

    def _lock(self, order_id: Any) -> OrderHeader:
        order = self._uow.order_headers.get_for_update(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    @staticmethod
    def _guard(order: OrderHeader, new_status: str) -> None:
        if not order.can_transition_to(new_status):
            logger.warning(
                "order.invalid_transition",
                order_id=str(order.id),
                current_status=order.order_status,
                new_status=new_status,
            )
            raise InvalidOrderStatus(
                f"Cannot transition from {order.order_status} to {new_status}."
            )

    def _change_status(
        self, order: OrderHeader, new_status: str, user: Any, notes: str
    ) -> None:
        self._guard(order, new_status)
        old_status = order.order_status
        order.order_status = new_status
        order._status_change_notes = notes
        order._status_changed_by = user
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=new_status
            )
        )
        logger.info(
            "order.status_changed",
            order_id=str(order.id),
            old_status=old_status,
            new_status=new_status,
        )
