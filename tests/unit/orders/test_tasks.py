"""Unit tests for the order confirmation e-mail task."""

from __future__ import annotations

from uuid import uuid4

import pytest
from django.core import mail

from modules.orders.tasks import ORDER_CONFIRMATION_SUBJECT, send_order_confirmation_email

pytestmark = pytest.mark.unit


def test_sends_confirmation_to_order_owner(make_order, customer):
    order = make_order(customer)

    result = send_order_confirmation_email(str(order.id))

    assert result == {"sent": True}
    assert len(mail.outbox) == 1
    message = mail.outbox[0]
    assert message.subject == ORDER_CONFIRMATION_SUBJECT == "New Order - Bookshop"
    assert message.to == ["customer@example.com"]
    assert str(order.id) in message.body
    assert "Jane Reader" in message.body


def test_missing_order_is_skipped():
    assert send_order_confirmation_email(str(uuid4())) == {"sent": False}
    assert mail.outbox == []


def test_user_without_email_is_skipped(make_order, customer):
    customer.email = ""
    customer.save()
    order = make_order(customer)

    assert send_order_confirmation_email(str(order.id)) == {"sent": False}
    assert mail.outbox == []


def test_runs_through_celery_eagerly(make_order, customer):
    order = make_order(customer)

    result = send_order_confirmation_email.delay(str(order.id))

    assert result.get() == {"sent": True}
    assert len(mail.outbox) == 1
