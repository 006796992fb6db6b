"""Order domain constants.

Status values, the allowed order-status transitions, and the list
filters exposed by the order management API.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    APPROVED = "Approved", "Approved"
    IN_PROCESS = "InProcess", "In Process"
    SHIPPED = "Shipped", "Shipped"
    CANCELLED = "Cancelled", "Cancelled"
    REFUNDED = "Refunded", "Refunded"


class PaymentStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    APPROVED = "Approved", "Approved"
    REJECTED = "Rejected", "Rejected"
    DELAYED_PAYMENT = "DelayedPayment", "Approved for delayed payment"
    # Written by the cancel flow
    REFUNDED = "Refunded", "Refunded"
    CANCELLED = "Cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.APPROVED, OrderStatus.CANCELLED},
    OrderStatus.APPROVED: {OrderStatus.IN_PROCESS, OrderStatus.CANCELLED},
    OrderStatus.IN_PROCESS: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: set(),
    OrderStatus.CANCELLED: set(),
    OrderStatus.REFUNDED: set(),
}

TERMINAL_STATES: set[str] = {
    OrderStatus.SHIPPED,
    OrderStatus.CANCELLED,
    OrderStatus.REFUNDED,
}

# ?status= values of the order list; unknown values (and "all") list everything
LIST_STATUS_FILTERS: dict[str, dict[str, str]] = {
    "pending": {"payment_status": PaymentStatus.DELAYED_PAYMENT},
    "inprocess": {"order_status": OrderStatus.IN_PROCESS},
    "completed": {"order_status": OrderStatus.SHIPPED},
    "approved": {"order_status": OrderStatus.APPROVED},
}

ORDER_TOPIC = "orders"
