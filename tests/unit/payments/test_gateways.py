"""Unit tests for the payment gateway adapters.

Covers:
- to_minor_units rounding.
- FakeGateway sessions, refunds, failure mode and webhook parsing.
- StripeGateway request shapes and error translation (stripe SDK patched).
- get_gateway / set_gateway selection.
"""

from __future__ import annotations

import json
from decimal import Decimal
from unittest.mock import patch

import pytest
import stripe

from modules.payments.exceptions import InvalidWebhookSignature, PaymentGatewayError
from modules.payments.gateway import get_gateway, reset_gateway
from modules.payments.gateway.fake_adapter import FakeGateway
from modules.payments.gateway.port import CheckoutLineItem, CheckoutSession
from modules.payments.gateway.stripe_adapter import StripeGateway, to_minor_units

pytestmark = pytest.mark.unit

LINE_ITEMS = [CheckoutLineItem(name="Dark Skies", unit_amount=Decimal("8.50"), quantity=2)]


@pytest.mark.parametrize(
    "amount, expected",
    [(Decimal("10"), 1000), (Decimal("8.50"), 850), (Decimal("0.005"), 1), (Decimal("19.994"), 1999)],
)
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount) == expected


def test_session_paid_flag():
    assert CheckoutSession(session_id="cs", payment_status="paid").is_paid
    assert not CheckoutSession(session_id="cs").is_paid


# ==== FakeGateway


class TestFakeGateway:
    def test_session_roundtrip(self):
        gateway = FakeGateway()

        session = gateway.create_checkout_session(LINE_ITEMS, "https://ok", "https://cancel", "ref")

        assert session.url.endswith(session.session_id)
        assert not gateway.retrieve_checkout_session(session.session_id).is_paid
        gateway.mark_session_paid(session.session_id, "pi_1")
        paid = gateway.retrieve_checkout_session(session.session_id)
        assert paid.is_paid
        assert paid.payment_intent_id == "pi_1"

    def test_unknown_session(self):
        with pytest.raises(PaymentGatewayError):
            FakeGateway().retrieve_checkout_session("cs_missing")

    def test_failure_mode(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Down")

        with pytest.raises(PaymentGatewayError, match="Down"):
            gateway.create_checkout_session(LINE_ITEMS, "a", "b", "c")
        refund = gateway.create_refund("pi_1", "requested_by_customer")
        assert not refund.success
        assert refund.failure_reason == "Down"

    def test_webhook_parsing(self):
        body = json.dumps(
            {
                "type": "checkout.session.completed",
                "data": {"object": {"id": "cs_1", "payment_status": "paid", "payment_intent": "pi_1"}},
            }
        ).encode()

        event = FakeGateway().construct_webhook_event(body, "test-signature")

        assert event.event_type == "checkout.session.completed"
        assert event.session == CheckoutSession(
            session_id="cs_1", payment_status="paid", payment_intent_id="pi_1"
        )

    def test_webhook_rejects_bad_signature_and_body(self):
        gateway = FakeGateway()
        with pytest.raises(InvalidWebhookSignature):
            gateway.construct_webhook_event(b"{}", "wrong")
        with pytest.raises(InvalidWebhookSignature):
            gateway.construct_webhook_event(b"not json", "test-signature")


# ==== StripeGateway


class TestStripeGateway:
    @pytest.fixture()
    def gateway(self):
        return StripeGateway(api_key="sk_test_123", webhook_secret="whsec_123", currency="usd")

    def test_create_session_payload(self, gateway):
        stripe_session = {
            "id": "cs_live",
            "url": "https://checkout.stripe.com/c/cs_live",
            "payment_status": "unpaid",
            "payment_intent": None,
        }
        with patch.object(stripe.checkout.Session, "create", return_value=stripe_session) as create:
            session = gateway.create_checkout_session(
                LINE_ITEMS, "https://ok", "https://cancel", "order-1"
            )

        kwargs = create.call_args.kwargs
        assert kwargs["mode"] == "payment"
        assert kwargs["client_reference_id"] == "order-1"
        assert kwargs["line_items"] == [
            {
                "price_data": {
                    "currency": "usd",
                    "unit_amount": 850,
                    "product_data": {"name": "Dark Skies"},
                },
                "quantity": 2,
            }
        ]
        assert session == CheckoutSession(
            session_id="cs_live", url="https://checkout.stripe.com/c/cs_live"
        )

    def test_create_session_error(self, gateway):
        with patch.object(
            stripe.checkout.Session, "create", side_effect=stripe.StripeError("boom")
        ):
            with pytest.raises(PaymentGatewayError, match="boom"):
                gateway.create_checkout_session(LINE_ITEMS, "a", "b", "c")

    def test_retrieve_expands_intent(self, gateway):
        stripe_session = {
            "id": "cs_1",
            "payment_status": "paid",
            "payment_intent": {"id": "pi_9", "object": "payment_intent"},
        }
        with patch.object(stripe.checkout.Session, "retrieve", return_value=stripe_session):
            session = gateway.retrieve_checkout_session("cs_1")
        assert session.is_paid
        assert session.payment_intent_id == "pi_9"

    def test_refund(self, gateway):
        with patch.object(
            stripe.Refund, "create", return_value={"id": "re_1", "status": "succeeded"}
        ) as create:
            result = gateway.create_refund("pi_1", "requested_by_customer")

        assert result.success
        assert result.gateway_refund_id == "re_1"
        assert create.call_args.kwargs["payment_intent"] == "pi_1"

    def test_refund_error_is_a_failed_result(self, gateway):
        with patch.object(stripe.Refund, "create", side_effect=stripe.StripeError("nope")):
            result = gateway.create_refund("pi_1", "requested_by_customer")
        assert not result.success
        assert result.failure_reason == "nope"

    def test_webhook_signature_failure(self, gateway):
        error = stripe.SignatureVerificationError("bad", "sig")
        with patch.object(stripe.Webhook, "construct_event", side_effect=error):
            with pytest.raises(InvalidWebhookSignature):
                gateway.construct_webhook_event(b"{}", "sig")

    def test_webhook_non_session_object(self, gateway):
        event = {"type": "charge.refunded", "data": {"object": {"object": "charge", "id": "ch_1"}}}
        with patch.object(stripe.Webhook, "construct_event", return_value=event):
            parsed = gateway.construct_webhook_event(b"{}", "sig")
        assert parsed.event_type == "charge.refunded"
        assert parsed.session is None


# ==== factory


def test_gateway_selected_from_settings(settings):
    settings.PAYMENT_GATEWAY = "stripe"
    settings.STRIPE_SECRET_KEY = "sk_test_x"
    reset_gateway()
    try:
        assert isinstance(get_gateway(), StripeGateway)
    finally:
        reset_gateway()

    settings.PAYMENT_GATEWAY = "fake"
    assert isinstance(get_gateway(), FakeGateway)
