"""OrderHeader, OrderDetail, and OrderStatusHistory models.

Business rules implemented:
- Orders are never deleted; cancellation is a status change.
- Every change of order or payment status generates a history record
  (see ``signals.py``).
- OrderDetail snapshots the tier price at checkout time (``price``).
- Gateway correlation: ``session_id`` and ``payment_intent_id``.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    PaymentStatus,
)
from shared.domain.events import DomainEventMixin


class OrderHeader(DomainEventMixin, BaseModel):
    """Order aggregate root.

    The shipping block (``name`` .. ``postal_code``) is copied from the
    checkout form and may later be corrected by staff.  ``payment_due_date``
    is only set for company orders paid on delayed terms, when shipped.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    order_date = models.DateTimeField(default=timezone.now)
    shipping_date = models.DateTimeField(null=True, blank=True)
    order_total = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    order_status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    tracking_number = models.CharField(max_length=100, blank=True, default="")
    carrier = models.CharField(max_length=100, blank=True, default="")
    payment_date = models.DateTimeField(null=True, blank=True)
    payment_due_date = models.DateTimeField(null=True, blank=True)
    session_id = models.CharField(max_length=255, blank=True, default="")
    payment_intent_id = models.CharField(max_length=255, blank=True, default="")

    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=30)
    street_address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    postal_code = models.CharField(max_length=20)

    class Meta:
        db_table = "order_headers"
        ordering = ["-order_date"]
        indexes = [
            models.Index(fields=["order_status"], name="orders_status_idx"),
            models.Index(fields=["payment_status"], name="orders_payment_status_idx"),
            models.Index(fields=["session_id"], name="orders_session_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.order_status in TERMINAL_STATES

    @property
    def is_delayed_payment(self) -> bool:
        return self.payment_status == PaymentStatus.DELAYED_PAYMENT

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether moving to *new_status* is a valid transition."""
        return new_status in VALID_TRANSITIONS.get(self.order_status, set())

    def __str__(self) -> str:
        return f"Order {self.id} ({self.order_status}/{self.payment_status})"


class OrderDetail(BaseModel):
    """Line item of an order.

    ``price`` is the unit price of the quantity tier at checkout and never
    follows later catalog changes.
    """

    order_header = models.ForeignKey(
        "orders.OrderHeader",
        on_delete=models.CASCADE,
        related_name="details",
    )
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="order_details",
    )
    count = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = "order_details"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(count__gte=1),
                name="order_details_count_positive",
            ),
        ]

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.count

    def __str__(self) -> str:
        return f"{self.product} x{self.count} (${self.price})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order and payment status changes.

    ``user`` is ``None`` when the change came from the system (gateway
    webhook, checkout).
    """

    order = models.ForeignKey(
        "orders.OrderHeader",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    old_payment_status = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=PaymentStatus.choices,
        null=True,
        blank=True,
    )
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.choices)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
