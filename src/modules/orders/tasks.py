"""Asynchronous tasks of the orders module."""

import structlog
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from modules.orders.models import OrderHeader

logger = structlog.get_logger(__name__)

ORDER_CONFIRMATION_SUBJECT = "New Order - Bookshop"


@shared_task(name="orders.send_order_confirmation_email")
def send_order_confirmation_email(order_id: str):
    """E-mail the customer that their order was received.

    Orders that vanished or belong to users without an e-mail address are
    skipped.
    """
    log = logger.bind(order_id=order_id)
    order = OrderHeader.objects.select_related("user").filter(pk=order_id).first()
    if order is None:
        log.warning("order_email.order_missing")
        return {"sent": False}
    if not order.user.email:
        log.info("order_email.no_recipient")
        return {"sent": False}

    message = (
        f"Hello {order.name},\n\n"
        f"Your order {order.id} has been received.\n"
        f"Order total: ${order.order_total}\n\n"
        "Thank you for shopping with us."
    )
    send_mail(
        ORDER_CONFIRMATION_SUBJECT,
        message,
        settings.DEFAULT_FROM_EMAIL,
        [order.user.email],
    )
    log.info("order_email.sent")
    return {"sent": True}
